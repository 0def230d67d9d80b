"""Mail webhook service: validates, fetches and parses statement emails.

The mail-processing service posts a notification with a validation URL,
a deletion URL and references to the email attachments. Processing is a
strict sequence of outbound calls:

    validate → fetch first attachment → delete email → parse

Each step depends on the previous one succeeding, except deletion, which
is best-effort. There are no retries; a failed step ends the request.
"""

from datetime import datetime

import httpx
import structlog
from pydantic import ValidationError

from apps.api.core.errors import (
    AuthorizationError,
    InputMissingError,
    StatementProcessingError,
    UnsupportedFormatError,
    UpstreamFetchError,
)
from apps.api.domains.mail_webhook.schemas import (
    Attachment,
    MailWebhookPayload,
    ValidationResult,
)
from apps.api.domains.mail_webhook.sink import TransactionSink
from packages.statement_parser import (
    StatementParseError,
    UnsupportedStatementError,
    detect_format,
    parse_statement,
    sort_by_date_descending,
)

logger = structlog.get_logger()

CONTENT_PREVIEW_CHARS = 100


class MailCallbackClient:
    """Outbound calls back to the mail-processing service."""

    def __init__(self, http: httpx.AsyncClient):
        self.http = http

    async def is_authorized(self, validation_url: str) -> bool:
        """Ask the validation callback whether this webhook call is genuine.

        An unreachable callback or a response without a boolean
        ``success`` counts as a rejection.
        """
        try:
            response = await self.http.get(validation_url)
            result = ValidationResult.model_validate(response.json())
        except httpx.HTTPError as e:
            logger.warning("validation_request_failed", error=str(e))
            return False
        except (ValueError, ValidationError) as e:
            logger.warning("validation_response_invalid", error=str(e))
            return False
        return result.success

    async def fetch_attachment(self, attachment: Attachment) -> str:
        """Download attachment content from its pre-signed URL as text."""
        try:
            response = await self.http.get(attachment.url)
        except httpx.HTTPError as e:
            logger.error("attachment_fetch_failed", filename=attachment.filename, error=str(e))
            raise UpstreamFetchError() from e

        if not response.is_success:
            logger.error(
                "attachment_fetch_failed",
                filename=attachment.filename,
                status_code=response.status_code,
                reason=response.reason_phrase,
            )
            raise UpstreamFetchError()

        return response.text

    async def delete_email(self, deletion_url: str) -> None:
        """Ask the mail service to delete the source email. Failures are ignored."""
        try:
            await self.http.delete(deletion_url)
        except httpx.HTTPError as e:
            logger.warning("email_deletion_failed", error=str(e))
            return
        logger.info("email_deleted")


async def process_statement_email(
    payload: MailWebhookPayload,
    callbacks: MailCallbackClient,
    sink: TransactionSink,
    cutoff: datetime,
) -> int:
    """Run the full webhook flow and return the number of transactions parsed.

    Raises:
        AuthorizationError: validation callback did not confirm the call.
        InputMissingError: the payload carries no attachments.
        UpstreamFetchError: the attachment could not be downloaded.
        UnsupportedFormatError: the attachment is not a known statement export.
        StatementProcessingError: the statement content is malformed.
    """
    if not await callbacks.is_authorized(payload.validation_url):
        logger.warning("webhook_not_authorized")
        raise AuthorizationError()

    if not payload.attachments:
        logger.error("webhook_missing_attachments")
        raise InputMissingError()

    attachment = payload.attachments[0]
    if len(payload.attachments) > 1:
        logger.debug("extra_attachments_ignored", ignored=len(payload.attachments) - 1)

    content = await callbacks.fetch_attachment(attachment)
    logger.info("attachment_fetched", filename=attachment.filename, chars=len(content))
    logger.debug("attachment_preview", preview=content[:CONTENT_PREVIEW_CHARS])

    await callbacks.delete_email(payload.deletion_url)

    try:
        statement_format = detect_format(attachment.filename)
    except UnsupportedStatementError as e:
        logger.error("unsupported_attachment", filename=attachment.filename)
        raise UnsupportedFormatError() from e

    try:
        transactions = parse_statement(statement_format, content, cutoff)
    except StatementParseError as e:
        logger.error("statement_parse_failed", filename=attachment.filename, error=str(e))
        raise StatementProcessingError() from e

    transactions = sort_by_date_descending(transactions)
    sink.handle(transactions, source_filename=attachment.filename)

    logger.info("statement_processed", format=statement_format.value, count=len(transactions))
    return len(transactions)

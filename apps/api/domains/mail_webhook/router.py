"""Mail webhook router for incoming bank statement emails.

Single canonical handler for ``POST /budget-email``. The transactions are
parsed and handed to the transaction sink. The caller only gets a
status; transaction counts are logged, never returned.
"""

import structlog
from fastapi import APIRouter, Depends

from apps.api.core.config import Settings, get_settings
from apps.api.deps import get_callback_client
from apps.api.domains.mail_webhook.schemas import MailWebhookPayload, WebhookResponse
from apps.api.domains.mail_webhook.service import MailCallbackClient, process_statement_email
from apps.api.domains.mail_webhook.sink import TransactionSink, get_transaction_sink

router = APIRouter(tags=["mail-webhook"])
logger = structlog.get_logger()


@router.post("/budget-email", response_model=WebhookResponse)
async def receive_budget_email(
    payload: MailWebhookPayload,
    callbacks: MailCallbackClient = Depends(get_callback_client),
    sink: TransactionSink = Depends(get_transaction_sink),
    settings: Settings = Depends(get_settings),
):
    """Validate the webhook call, fetch the statement and parse it."""
    logger.info("budget_email_received", attachments=len(payload.attachments))
    await process_statement_email(
        payload,
        callbacks=callbacks,
        sink=sink,
        cutoff=settings.STATEMENT_CUTOFF,
    )
    return WebhookResponse()

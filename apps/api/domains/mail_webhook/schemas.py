"""Pydantic schemas for the mail webhook domain."""

from pydantic import BaseModel, Field


class Attachment(BaseModel):
    """An email attachment hosted behind a temporary pre-signed URL."""

    filename: str
    url: str
    content_id: str = ""
    content_type: str = ""
    size: int = 0


class MailWebhookPayload(BaseModel):
    """Body posted by the mail-processing service when an email arrives."""

    validation_url: str
    deletion_url: str
    attachments: list[Attachment] = Field(default_factory=list)


class ValidationResult(BaseModel):
    """Response of the webhook validation callback."""

    success: bool = False


class WebhookResponse(BaseModel):
    """Acknowledgement returned to the mail-processing service."""

    status: str = "processed"

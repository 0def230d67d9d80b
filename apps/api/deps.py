"""FastAPI dependencies for outbound HTTP access.

Each request gets its own ``httpx.AsyncClient``, closed once the response
is sent. Tests override ``get_http_client`` to inject a mock transport.
"""
from typing import AsyncIterator

import httpx
from fastapi import Depends

from apps.api.core.config import Settings, get_settings
from apps.api.domains.mail_webhook.service import MailCallbackClient


async def get_http_client(
    settings: Settings = Depends(get_settings),
) -> AsyncIterator[httpx.AsyncClient]:
    """Provide an HTTP client for the webhook callbacks."""
    async with httpx.AsyncClient(timeout=settings.OUTBOUND_TIMEOUT_SECONDS) as client:
        yield client


async def get_callback_client(
    http: httpx.AsyncClient = Depends(get_http_client),
) -> MailCallbackClient:
    return MailCallbackClient(http)

"""Budget Email Gateway: FastAPI entry point.

Serves the health check and the mail webhook that ingests Capitec and
Discovery Bank statement attachments.

Run locally with:
    uvicorn apps.api.main:app --reload
"""

import structlog
from contextlib import asynccontextmanager
from fastapi import FastAPI

from apps.api.core.config import settings
from apps.api.core.errors import register_error_handlers
from apps.api.core.logging import setup_logging
from apps.api.core.middleware import register_request_context
from apps.api.domains.mail_webhook.router import router as mail_webhook_router
from apps.api.routers import health

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: startup/shutdown hooks."""
    setup_logging(log_level=settings.log_level, json_output=settings.json_logs)
    logger.info("app_starting", version=settings.APP_VERSION, environment=settings.ENVIRONMENT)
    yield
    logger.info("app_stopping")


app = FastAPI(
    title="Budget Email Gateway",
    description="Receives bank statement emails and normalizes their transactions.",
    version=settings.APP_VERSION,
    lifespan=lifespan,
)

register_error_handlers(app)
register_request_context(app)

app.include_router(health.router)
app.include_router(mail_webhook_router)

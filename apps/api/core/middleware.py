"""Request context middleware.

Gives every request a ``request_id`` (from ``X-Request-ID`` or freshly
generated), exposes it on ``request.state`` for the error handlers, binds
it into structlog contextvars for log lines, and echoes it back.
"""

import uuid

import structlog
from fastapi import FastAPI, Request

REQUEST_ID_HEADER = "X-Request-ID"


def register_request_context(app: FastAPI) -> None:
    """Attach the request-id middleware to the app."""

    @app.middleware("http")
    async def request_context(request: Request, call_next):
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        request.state.request_id = request_id

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(request_id=request_id, path=request.url.path)

        response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = request_id
        return response

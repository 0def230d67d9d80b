"""RFC 7807 Problem Details error handling.

Provides centralized exception handlers and the application error
classes raised by the webhook flow. All errors return a consistent JSON
format:

    {
        "type": "about:blank",
        "title": "Forbidden",
        "status": 403,
        "detail": "Not authorized",
        "instance": "/budget-email",
        "request_id": "5f0c..."
    }
"""

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = structlog.get_logger()


class AppError(Exception):
    """Base application error."""

    def __init__(self, detail: str, status_code: int = 500, error_type: str = "about:blank"):
        self.detail = detail
        self.status_code = status_code
        self.error_type = error_type
        super().__init__(detail)


class AuthorizationError(AppError):
    """The webhook validation callback rejected the request."""

    def __init__(self, detail: str = "Not authorized"):
        super().__init__(detail=detail, status_code=403)


class InputMissingError(AppError):
    """A required part of the request payload is absent."""

    def __init__(self, detail: str = "No attachments found"):
        super().__init__(detail=detail, status_code=400)


class UnsupportedFormatError(AppError):
    """The attachment is not a known statement export."""

    def __init__(self, detail: str = "Unsupported attachment type"):
        super().__init__(detail=detail, status_code=400)


class UpstreamFetchError(AppError):
    """An upstream resource could not be retrieved."""

    def __init__(self, detail: str = "Failed to fetch attachment"):
        super().__init__(detail=detail, status_code=502)


class StatementProcessingError(AppError):
    """The statement content could not be parsed."""

    def __init__(self, detail: str = "Failed to parse statement"):
        super().__init__(detail=detail, status_code=500)


def _build_problem_detail(
    status: int,
    title: str,
    detail: str,
    error_type: str = "about:blank",
    instance: str = "",
    request_id: str = "",
) -> dict:
    """Build RFC 7807 Problem Details response body."""
    body = {
        "type": error_type,
        "title": title,
        "status": status,
        "detail": detail,
    }
    if instance:
        body["instance"] = instance
    if request_id:
        body["request_id"] = request_id
    return body


# HTTP status code to title mapping
_STATUS_TITLES = {
    400: "Bad Request",
    403: "Forbidden",
    404: "Not Found",
    405: "Method Not Allowed",
    422: "Unprocessable Entity",
    500: "Internal Server Error",
    502: "Bad Gateway",
}


def register_error_handlers(app: FastAPI) -> None:
    """Register global exception handlers on the FastAPI app."""

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
        title = _STATUS_TITLES.get(exc.status_code, "Error")
        request_id = getattr(request.state, "request_id", "")
        body = _build_problem_detail(
            status=exc.status_code,
            title=title,
            detail=exc.detail,
            error_type=exc.error_type,
            instance=str(request.url.path),
            request_id=request_id,
        )
        return JSONResponse(status_code=exc.status_code, content=body)

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        title = _STATUS_TITLES.get(exc.status_code, "Error")
        detail = exc.detail if isinstance(exc.detail, str) else str(exc.detail)
        request_id = getattr(request.state, "request_id", "")
        body = _build_problem_detail(
            status=exc.status_code,
            title=title,
            detail=detail,
            instance=str(request.url.path),
            request_id=request_id,
        )
        return JSONResponse(status_code=exc.status_code, content=body)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        request_id = getattr(request.state, "request_id", "")
        fields = ", ".join(".".join(str(p) for p in err["loc"]) for err in exc.errors())
        body = _build_problem_detail(
            status=422,
            title="Unprocessable Entity",
            detail=f"Invalid request body: {fields}",
            instance=str(request.url.path),
            request_id=request_id,
        )
        return JSONResponse(status_code=422, content=body)

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        request_id = getattr(request.state, "request_id", "")
        logger.exception("unhandled_error", path=str(request.url.path))
        body = _build_problem_detail(
            status=500,
            title="Internal Server Error",
            detail="An unexpected error occurred",
            instance=str(request.url.path),
            request_id=request_id,
        )
        return JSONResponse(status_code=500, content=body)

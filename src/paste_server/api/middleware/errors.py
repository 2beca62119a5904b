"""Exception handlers turning failures into ``{"error": {...}}`` JSON bodies.

Paste errors carry their own status code and error type. Routing errors
from Starlette keep their status. Anything else is a 500 whose message never
includes the underlying exception text.
"""

from typing import Any

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette import status
from starlette.exceptions import HTTPException as StarletteHTTPException
from structlog import get_logger

from paste_server.exceptions import ErrorType, PasteServerError


logger = get_logger(__name__)


def _error_response(status_code: int, error_type: str, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": {"type": error_type, "message": message}},
    )


def _request_fields(request: Request, status_code: int) -> dict[str, Any]:
    """Record the status for access logging and return the common log fields."""
    context = getattr(request.state, "context", None)
    if context is not None:
        context.add_metadata(status_code=status_code)
    return {
        "status_code": status_code,
        "method": request.method,
        "path": request.url.path,
    }


async def handle_paste_server_error(
    request: Request, exc: PasteServerError
) -> JSONResponse:
    error_type = str(exc.error_type)
    fields = _request_fields(request, exc.status_code)
    fields.update(exc.details)

    if exc.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        logger.error(
            "paste_request_failed",
            error_type=error_type,
            error_message=exc.message,
            cause=repr(exc.__cause__) if exc.__cause__ else None,
            **fields,
        )
    else:
        if exc.status_code == status.HTTP_401_UNAUTHORIZED and request.client:
            fields["client_ip"] = request.client.host
        logger.info(
            "paste_request_rejected",
            error_type=error_type,
            error_message=exc.message,
            **fields,
        )

    return _error_response(exc.status_code, error_type, exc.message)


async def handle_http_exception(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    fields = _request_fields(request, exc.status_code)
    log = logger.error if exc.status_code >= 500 else logger.debug
    log("http_exception", detail=exc.detail, **fields)
    return _error_response(exc.status_code, "http_error", str(exc.detail))


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    fields = _request_fields(request, status.HTTP_500_INTERNAL_SERVER_ERROR)
    logger.error(
        "unhandled_exception",
        error_class=type(exc).__name__,
        exc_info=exc,
        **fields,
    )
    return _error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        ErrorType.INTERNAL_SERVER,
        "An internal server error occurred",
    )


def setup_error_handlers(app: FastAPI) -> None:
    """Register the paste, HTTP and catch-all handlers on ``app``."""
    app.add_exception_handler(PasteServerError, handle_paste_server_error)
    app.add_exception_handler(StarletteHTTPException, handle_http_exception)
    app.add_exception_handler(Exception, handle_unexpected_error)

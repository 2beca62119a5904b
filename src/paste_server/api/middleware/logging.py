"""One structured access log line per request."""

import asyncio
import time

import structlog
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint


logger = structlog.get_logger(__name__)


class AccessLogMiddleware(BaseHTTPMiddleware):
    """Logs method, path, status and timing once the response is produced.

    Requests that end without a response are logged as ``request_error`` and
    the exception continues up the stack.
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        started = time.perf_counter()
        fields = {
            "method": request.method,
            "path": request.url.path,
            "client_ip": request.client.host if request.client else "unknown",
        }

        try:
            response = await call_next(request)
        except (Exception, asyncio.CancelledError) as e:
            logger.error(
                "request_error",
                request_id=_request_id(request),
                duration_ms=_elapsed_ms(started),
                error_message=str(e) or type(e).__name__,
                **fields,
            )
            raise

        context = getattr(request.state, "context", None)
        if context is not None:
            context.add_metadata(status_code=response.status_code)

        logger.info(
            "request_complete",
            request_id=_request_id(request) or "unknown",
            status_code=response.status_code,
            duration_ms=_elapsed_ms(started),
            user_agent=request.headers.get("user-agent", "unknown"),
            **fields,
        )
        return response


def _request_id(request: Request) -> str | None:
    context = getattr(request.state, "context", None)
    return getattr(context, "request_id", None)


def _elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 2)

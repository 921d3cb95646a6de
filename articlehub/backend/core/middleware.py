"""
Request Context Middleware.

Binds a request ID and the calling source to every log record emitted while
an HTTP request is processed. Telegram webhook calls are tagged as source
"telegram", Mini App calls default to "web".
"""

import uuid

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from articlehub.backend.core.logging import VALID_SOURCES, get_logger
from articlehub.backend.core.utils import utc_now

logger = get_logger(__name__)


def _resolve_source(request: Request) -> str:
    if request.url.path.startswith("/webhook/"):
        return "telegram"
    source = request.headers.get("X-Frontend-ID", "web").lower()
    return source if source in VALID_SOURCES else "unknown"


class RequestContextMiddleware(BaseHTTPMiddleware):
    """
    Adds request context to every request.

    Headers:
    - X-Request-ID: Unique request identifier (generated if not provided)
    - X-Frontend-ID: Caller identifier, one of VALID_SOURCES
    - X-Response-Time: Response duration in milliseconds (set on the response)

    Access in endpoints:
        request.state.request_id
        request.state.source
    """

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        source = _resolve_source(request)
        start_time = utc_now()

        request.state.request_id = request_id
        request.state.source = source

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            source=source,
            method=request.method,
            path=request.url.path,
        )

        try:
            response = await call_next(request)

            duration_ms = int((utc_now() - start_time).total_seconds() * 1000)
            response.headers["X-Request-ID"] = request_id
            response.headers["X-Response-Time"] = f"{duration_ms}ms"

            logger.debug(
                "Request completed",
                extra={"status_code": response.status_code, "duration_ms": duration_ms},
            )
            return response

        except Exception as exc:
            duration_ms = int((utc_now() - start_time).total_seconds() * 1000)
            logger.error(
                "Request failed with exception",
                extra={"duration_ms": duration_ms, "error_type": type(exc).__name__},
            )
            raise

        finally:
            structlog.contextvars.clear_contextvars()

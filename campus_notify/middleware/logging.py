import logging
import time
import uuid
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)

def _actor_label(request: Request) -> str:
    # set by deps.get_current_actor once the bearer token is resolved
    actor = getattr(request.state, "actor", None)
    if actor is None:
        return "anonymous"
    return f"{actor.user_type}:{actor.user_id}"

class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log one line per request tagged with the request id and the calling account.

    A caller-supplied X-Request-ID is reused so error envelopes and log lines
    can be matched to the client's own trace.
    """

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        request.state.request_id = request_id
        started = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception as exc:
            logger.error(
                f"[{request_id}] {request.method} {request.url.path} by {_actor_label(request)} - ERROR",
                extra={
                    "request_id": request_id,
                    "actor": _actor_label(request),
                    "duration_ms": round((time.perf_counter() - started) * 1000, 2),
                    "error": str(exc),
                },
            )
            raise

        duration_ms = round((time.perf_counter() - started) * 1000, 2)
        actor = _actor_label(request)
        log_level = logging.WARNING if response.status_code >= 400 else logging.INFO
        logger.log(
            log_level,
            f"[{request_id}] {request.method} {request.url.path} by {actor} - {response.status_code} ({duration_ms} ms)",
            extra={
                "request_id": request_id,
                "actor": actor,
                "status_code": response.status_code,
                "duration_ms": duration_ms,
            },
        )

        response.headers["X-Request-ID"] = request_id
        return response

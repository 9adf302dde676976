"""
Request tracking for the storefront API.

Every request gets a request id (taken from ``X-Request-ID`` when the
frontend sends one) bound into the structlog context. Routes that work on a
store order add the order id with ``bind_order_context``.
"""
import time
import uuid
from typing import Callable

from fastapi import Request, Response
from structlog.contextvars import bind_contextvars, clear_contextvars

from storefront.logging_config import get_logger

logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"

# Polled constantly by the load balancer
QUIET_PATHS = frozenset({"/health"})


async def request_id_middleware(request: Request, call_next: Callable) -> Response:
    request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
    path = request.url.path

    clear_contextvars()
    bind_contextvars(request_id=request_id, method=request.method, path=path)
    request.state.request_id = request_id

    quiet = path in QUIET_PATHS
    if not quiet:
        logger.info("request_started", client_host=request.client.host if request.client else None)
    start = time.perf_counter()

    try:
        response = await call_next(request)
    except Exception as exc:
        logger.error("request_failed", exc_info=exc, duration_ms=round((time.perf_counter() - start) * 1000, 2))
        raise
    else:
        if not quiet or response.status_code >= 500:
            logger.info(
                "request_completed",
                status_code=response.status_code,
                duration_ms=round((time.perf_counter() - start) * 1000, 2),
            )
        response.headers[REQUEST_ID_HEADER] = request_id
        return response
    finally:
        clear_contextvars()

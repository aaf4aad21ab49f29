"""Per-request access log with status and latency for every HTTP call.

Registered as an ``http`` middleware in ``create_app``. Responses with a
status of 400 or above are logged at ERROR, everything else at INFO.
"""

import logging
import time
from collections.abc import Awaitable, Callable

from fastapi import Request, Response

logger = logging.getLogger("users_api.requests")


async def log_requests(
    request: Request,
    call_next: Callable[[Request], Awaitable[Response]],
) -> Response:
    start = time.perf_counter()
    response = await call_next(request)
    latency_ms = (time.perf_counter() - start) * 1000

    level = logging.ERROR if response.status_code >= 400 else logging.INFO
    logger.log(
        level,
        "finished processing request: %s %s status=%d latency=%.2f ms",
        request.method,
        request.url.path,
        response.status_code,
        latency_ms,
    )
    return response

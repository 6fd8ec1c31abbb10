"""
Middleware for performance monitoring and observability.
"""

import time
import uuid
import logging
from typing import Callable
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

# Configure structured logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger("acord_intake")

SLOW_REQUEST_THRESHOLD_MS = 250


def is_form_generation_path(path: str) -> bool:
    return path == "/v1/acord/generate" or (
        path.startswith("/v1/submissions/") and path.endswith("/acord-forms")
    )


class PerformanceMiddleware(BaseHTTPMiddleware):
    """
    Middleware to track request performance and add request IDs.

    Features:
    - Adds X-Request-ID header (uses provided value or generates a UUID)
    - Tracks request duration and adds X-Response-Time-Ms
    - Logs request/response details
    - Warns on slow form generation requests
    """

    def __init__(self, app: ASGIApp):
        super().__init__(app)

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())

        # Store request ID in request state for access by endpoints
        request.state.request_id = request_id

        start_time = time.time()

        logger.info(
            f"Request started | "
            f"request_id={request_id} | "
            f"method={request.method} | "
            f"path={request.url.path} | "
            f"client={request.client.host if request.client else 'unknown'}"
        )

        try:
            response = await call_next(request)

            duration_ms = (time.time() - start_time) * 1000

            logger.info(
                f"Request completed | "
                f"request_id={request_id} | "
                f"method={request.method} | "
                f"path={request.url.path} | "
                f"status={response.status_code} | "
                f"duration_ms={duration_ms:.2f}"
            )

            response.headers["X-Request-ID"] = request_id
            response.headers["X-Response-Time-Ms"] = f"{duration_ms:.2f}"

            if duration_ms > SLOW_REQUEST_THRESHOLD_MS and is_form_generation_path(request.url.path):
                logger.warning(
                    f"Slow form generation request | "
                    f"request_id={request_id} | "
                    f"path={request.url.path} | "
                    f"duration_ms={duration_ms:.2f} | "
                    f"threshold_ms={SLOW_REQUEST_THRESHOLD_MS}"
                )

            return response

        except Exception as e:
            duration_ms = (time.time() - start_time) * 1000

            logger.error(
                f"Request failed | "
                f"request_id={request_id} | "
                f"method={request.method} | "
                f"path={request.url.path} | "
                f"duration_ms={duration_ms:.2f} | "
                f"error={str(e)}"
            )
            raise


class RequestContextMiddleware(BaseHTTPMiddleware):
    """
    Middleware to inject request context.

    Makes request_id available to all downstream handlers.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        if not hasattr(request.state, "request_id"):
            request.state.request_id = request.headers.get(
                "X-Request-ID",
                str(uuid.uuid4())
            )

        response = await call_next(request)
        return response

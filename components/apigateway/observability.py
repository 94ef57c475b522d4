from __future__ import annotations
import time, uuid
from typing import Callable
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
import logging

logger = logging.getLogger("apigateway")

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Assigns a request id, echoes it back and logs start/end of each request.
    Request headers are never logged; they carry bearer tokens."""

    async def dispatch(self, request: Request, call_next: Callable):
        start = time.perf_counter()
        request_id = request.headers.get("x-request-id") or str(uuid.uuid4())
        request.state.request_id = request_id

        logger.info("request.start request_id=%s method=%s path=%s", request_id, request.method, request.url.path)
        try:
            response: Response = await call_next(request)
        except Exception:
            duration_ms = int((time.perf_counter() - start) * 1000)
            logger.exception("request.exception request_id=%s duration_ms=%d", request_id, duration_ms)
            raise
        duration_ms = int((time.perf_counter() - start) * 1000)
        response.headers["x-request-id"] = request_id
        logger.info(
            "request.end request_id=%s status=%d duration_ms=%d",
            request_id, response.status_code, duration_ms,
        )
        return response

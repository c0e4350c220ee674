"""Request-scoped logging context."""

import time
import uuid
from typing import Callable

import structlog
from django.http import HttpRequest, HttpResponse

logger = structlog.get_logger()

REQUEST_ID_HEADER = "X-Request-ID"


class CorrelationIdMiddleware:
    """Tag every log line emitted while serving a request with one ID.

    A caller-supplied ``X-Request-ID`` is reused as is; otherwise a UUID4 is
    generated.  The ID is echoed on the response and kept on
    ``request.correlation_id`` for views that log outside structlog.
    """

    def __init__(self, get_response: Callable[[HttpRequest], HttpResponse]) -> None:
        self.get_response = get_response

    def __call__(self, request: HttpRequest) -> HttpResponse:
        correlation_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        request.correlation_id = correlation_id

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            correlation_id=correlation_id,
            method=request.method,
            path=request.get_full_path(),
        )

        started = time.monotonic()
        logger.info("request.started")
        response = self.get_response(request)
        logger.info(
            "request.finished",
            status_code=response.status_code,
            duration_ms=round((time.monotonic() - started) * 1000, 1),
        )

        response[REQUEST_ID_HEADER] = correlation_id
        return response

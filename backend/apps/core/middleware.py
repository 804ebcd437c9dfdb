"""
Core middleware.
"""

import time
import uuid
from collections.abc import Callable

from django.http import HttpRequest, HttpResponse

from apps.core.logging import bind_contextvars, clear_contextvars, get_logger

logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"
MAX_REQUEST_ID_LENGTH = 128


class RequestContextMiddleware:
    """
    Binds a per-request logging context.

    The trace id is taken from the X-Request-ID header when the caller sends
    one, otherwise generated. It is echoed back on the response so clients can
    quote it when reporting failures.
    """

    def __init__(self, get_response: Callable[[HttpRequest], HttpResponse]) -> None:
        self.get_response = get_response

    def __call__(self, request: HttpRequest) -> HttpResponse:
        clear_contextvars()
        trace_id = self._get_trace_id(request)
        request.trace_id = trace_id  # type: ignore[attr-defined]
        bind_contextvars(
            trace_id=trace_id,
            **{"http.method": request.method, "http.path": request.path},
        )

        started = time.monotonic()
        try:
            response = self.get_response(request)
            response[REQUEST_ID_HEADER] = trace_id
            logger.info(
                "request_finished",
                **{"http.status_code": response.status_code},
                duration_ms=(time.monotonic() - started) * 1000,
            )
            return response
        finally:
            clear_contextvars()

    @staticmethod
    def _get_trace_id(request: HttpRequest) -> str:
        incoming = request.headers.get(REQUEST_ID_HEADER, "").strip()
        if incoming and len(incoming) <= MAX_REQUEST_ID_LENGTH:
            return incoming
        return uuid.uuid4().hex

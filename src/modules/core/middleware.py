import uuid
from contextvars import ContextVar
from typing import Callable

import structlog
from django.http import HttpRequest, HttpResponse

REQUEST_ID_HEADER = "X-Request-ID"

correlation_id_var: ContextVar[str] = ContextVar("correlation_id", default="")

logger = structlog.get_logger(__name__)


class CorrelationIdMiddleware:
    """Tag every request, and every log line it produces, with a request ID.

    Reuses the caller's ``X-Request-ID`` header when present, otherwise a new
    UUID4.  The ID is bound into structlog's contextvars so it reaches log
    lines emitted deep inside the service layer (including the order
    transaction) and is echoed back on the response.
    """

    def __init__(self, get_response: Callable[[HttpRequest], HttpResponse]) -> None:
        self.get_response = get_response

    def __call__(self, request: HttpRequest) -> HttpResponse:
        cid = request.META.get("HTTP_X_REQUEST_ID") or str(uuid.uuid4())
        token = correlation_id_var.set(cid)

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            correlation_id=cid,
            method=request.method,
            path=request.path,
        )

        logger.info("request_started", correlation_id=cid)
        try:
            response = self.get_response(request)
        finally:
            correlation_id_var.reset(token)

        logger.info(
            "request_finished",
            correlation_id=cid,
            status_code=response.status_code,
        )
        structlog.contextvars.clear_contextvars()

        response[REQUEST_ID_HEADER] = cid
        return response

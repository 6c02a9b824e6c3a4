"""DRF exception handler shared by every module.

Domain exceptions are translated by the views themselves.  This handler only
covers what escapes them: DRF's own exceptions keep their default format and
database faults become a generic ``StorageFailure`` response instead of an
HTML 500 page.
"""

from __future__ import annotations

import structlog
from django.db import DatabaseError
from pydantic import ValidationError as PydanticValidationError
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler, set_rollback

logger = structlog.get_logger(__name__)

STORAGE_FAILURE = "StorageFailure"


def api_exception_handler(exc, context):
    response = exception_handler(exc, context)
    if response is not None:
        return response

    if isinstance(exc, DatabaseError):
        view = context.get("view")
        logger.error(
            "api.database_error",
            view=type(view).__name__ if view else None,
            error=str(exc),
            exc_info=exc,
        )
        set_rollback()
        return Response(
            {"error": STORAGE_FAILURE, "detail": "Database error."},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    return None


def format_validation_error(exc: PydanticValidationError) -> str:
    """Flatten a Pydantic ``ValidationError`` into a single readable line."""
    parts = []
    for err in exc.errors():
        location = ".".join(str(part) for part in err["loc"])
        parts.append(f"{location}: {err['msg']}" if location else err["msg"])
    return "; ".join(parts)


class InvalidFilters(Exception):
    """List query parameters failed FilterSet validation.

    ``errors`` maps each offending parameter to its messages, the same
    shape DRF uses for field errors.
    """

    def __init__(self, errors: dict) -> None:
        super().__init__("Invalid filter parameters.")
        self.errors = errors

    @classmethod
    def from_filterset(cls, filterset) -> InvalidFilters:
        return cls(
            {
                field: [error["message"] for error in messages]
                for field, messages in filterset.errors.get_json_data().items()
            }
        )

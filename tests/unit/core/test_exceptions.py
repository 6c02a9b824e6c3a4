"""Unit tests for the shared DRF exception handler and error formatting."""

from __future__ import annotations

import pytest
from django.db import OperationalError
from pydantic import BaseModel, ValidationError
from rest_framework.exceptions import NotFound

from modules.core.exceptions import api_exception_handler, format_validation_error

pytestmark = pytest.mark.unit


class _Sample(BaseModel):
    count: int


class TestApiExceptionHandler:
    def test_drf_exception_keeps_default_format(self):
        response = api_exception_handler(NotFound(), {})
        assert response.status_code == 404
        assert "detail" in response.data

    def test_database_error_becomes_storage_failure(self):
        response = api_exception_handler(OperationalError("gone"), {"view": None})
        assert response.status_code == 500
        assert response.data == {"error": "StorageFailure", "detail": "Database error."}

    def test_other_exceptions_propagate(self):
        assert api_exception_handler(RuntimeError("boom"), {}) is None


def test_format_validation_error():
    with pytest.raises(ValidationError) as excinfo:
        _Sample(count="many")
    assert format_validation_error(excinfo.value).startswith("count: ")

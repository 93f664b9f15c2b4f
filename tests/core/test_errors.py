"""Tests for error handling"""
import json

import pytest
from unittest.mock import Mock, patch
from fastapi import HTTPException
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from app.core.errors import (
    ErrorResponse,
    error_response_handler,
    http_exception_handler,
    validation_exception_handler,
)


class TestErrorResponse:
    """Test ErrorResponse exception class"""

    def test_error_response_creation(self):
        error = ErrorResponse("Something went wrong", status_code=400)
        assert error.message == "Something went wrong"
        assert error.status_code == 400
        assert error.details == {}

    def test_error_response_with_details(self):
        details = {"field": "price", "issue": "negative"}
        error = ErrorResponse("Validation failed", status_code=422, details=details)
        assert error.details == details

    def test_error_response_default_status_code(self):
        assert ErrorResponse("Bad request").status_code == 400

    def test_error_response_str(self):
        assert str(ErrorResponse("Test error")) == "Test error"


class TestErrorHandlers:
    """Test error handler functions"""

    @pytest.mark.asyncio
    async def test_error_response_handler(self):
        error = ErrorResponse("Product not found", status_code=404, details={"id": "123"})

        with patch("app.core.errors.logger"):
            response = await error_response_handler(Mock(), error)

        assert isinstance(response, JSONResponse)
        assert response.status_code == 404
        assert json.loads(response.body) == {"error": "Product not found", "details": {"id": "123"}}

    @pytest.mark.asyncio
    async def test_http_exception_handler(self):
        exception = HTTPException(status_code=403, detail="Forbidden")

        with patch("app.core.errors.logger"):
            response = await http_exception_handler(Mock(), exception)

        assert response.status_code == 403
        assert json.loads(response.body) == {"error": "Forbidden"}

    @pytest.mark.asyncio
    async def test_validation_exception_handler(self):
        exception = RequestValidationError([{"loc": ["body", "price"], "msg": "too small", "type": "value_error"}])

        with patch("app.core.errors.logger"):
            response = await validation_exception_handler(Mock(), exception)

        assert response.status_code == 422
        body = json.loads(response.body)
        assert body["error"] == "Validation error"
        assert body["details"]["errors"][0]["msg"] == "too small"

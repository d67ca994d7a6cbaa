"""Tests for global exception handlers.

Validates that all exception types are handled consistently with
proper HTTP status codes, error format, and no information leakage.
"""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from contact_api.core.errors import (
    AppError,
    ConfigurationAppError,
    EmailDeliveryAppError,
    SlotStoreError,
    ValidationAppError,
)
from contact_api.core.exception_handlers import setup_exception_handlers


@pytest.fixture
def app_with_handlers() -> FastAPI:
    """Create FastAPI app with exception handlers registered."""
    app = FastAPI()
    setup_exception_handlers(app)
    return app


@pytest.fixture
def client(app_with_handlers: FastAPI) -> TestClient:
    """Create test client that returns 500 responses instead of raising."""
    return TestClient(app_with_handlers, raise_server_exceptions=False)


class TestAppErrorHandler:
    """Test handler for AppError and subclasses."""

    def test_validation_error_returns_400_with_details(self, client: TestClient, app_with_handlers: FastAPI):
        """Verify ValidationAppError returns HTTP 400 with its details."""
        @app_with_handlers.get("/test-validation")
        async def test_endpoint():
            raise ValidationAppError(
                code="missing_fields",
                message="Missing fields",
                details={"fields": ["name", "message"]},
            )

        response = client.get("/test-validation")

        assert response.status_code == 400
        data = response.json()
        assert data["error"]["code"] == "missing_fields"
        assert data["error"]["message"] == "Missing fields"
        assert data["error"]["details"] == {"fields": ["name", "message"]}
        assert "request_id" in data["error"]

    @pytest.mark.parametrize(
        "error",
        [
            SlotStoreError(
                code="slot_store_unavailable",
                message="Rate limit store request failed",
                details={"backend": "redis"},
            ),
            EmailDeliveryAppError(
                code="email_delivery_failed",
                message="Email channel could not deliver the message",
                details={"backend": "smtp"},
            ),
            ConfigurationAppError(
                code="email_sender_not_configured",
                message="Sender address is not configured",
                details={"setting": "EMAIL_FROM_ADDRESS"},
            ),
        ],
    )
    def test_server_faults_are_opaque_500s(self, client: TestClient, app_with_handlers: FastAPI, error: AppError):
        """Verify infrastructure/configuration faults hide their cause."""
        @app_with_handlers.get("/test-fault")
        async def test_endpoint():
            raise error

        response = client.get("/test-fault")

        assert response.status_code == 500
        data = response.json()
        assert data["error"]["code"] == "internal_server_error"
        assert error.message not in response.text
        assert error.code not in response.text
        assert "details" not in data["error"]


class TestGeneralExceptionHandler:
    """Test fallback handler for unexpected exceptions."""

    def test_unexpected_exception_returns_generic_500(self, client: TestClient, app_with_handlers: FastAPI):
        """Verify unexpected errors never leak messages or stack traces."""
        @app_with_handlers.get("/test-crash")
        async def test_endpoint():
            raise RuntimeError("Unexpected error: database connection failed")

        response = client.get("/test-crash")

        assert response.status_code == 500
        data = response.json()
        assert data["error"]["code"] == "internal_server_error"
        assert "database connection" not in response.text
        assert "Traceback" not in response.text
        assert "RuntimeError" not in response.text

    def test_unexpected_exception_response_has_cors_headers(self, client: TestClient, app_with_handlers: FastAPI):
        """Verify the fallback response stays readable by browsers."""
        @app_with_handlers.get("/test-crash-cors")
        async def test_endpoint():
            raise ValueError("boom")

        response = client.get("/test-crash-cors")

        assert response.status_code == 500
        assert "Access-Control-Allow-Origin" in response.headers


class TestErrorHandlerIntegration:
    """Integration tests for exception handler setup."""

    def test_setup_exception_handlers_registers_handlers(self, app_with_handlers: FastAPI):
        """Verify setup_exception_handlers properly registers handlers."""
        assert AppError in app_with_handlers.exception_handlers
        assert Exception in app_with_handlers.exception_handlers

    def test_multiple_handler_setups_does_not_fail(self):
        """Verify calling setup_exception_handlers multiple times is safe."""
        app = FastAPI()

        setup_exception_handlers(app)
        setup_exception_handlers(app)

        assert AppError in app.exception_handlers

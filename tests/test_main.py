"""
Tests for employee_portal/main.py, api/errors.py and core/middleware.py.
"""
import pytest
from unittest.mock import AsyncMock, MagicMock, patch
from fastapi import status
from httpx import AsyncClient, ASGITransport


class TestHealthEndpoint:
    """Test application health check endpoint."""

    @pytest.mark.asyncio
    async def test_health_check_healthy(self):
        """Health check should return healthy when DB is connected."""
        from employee_portal.main import health_check

        with patch("employee_portal.main.check_db_connection", new_callable=AsyncMock) as mock_db:
            mock_db.return_value = True

            response = await health_check()

        assert response.status == "healthy"
        assert response.checks["database"] is True

    @pytest.mark.asyncio
    async def test_health_check_unhealthy_when_db_down(self):
        """Health check should return 503 when DB is down."""
        from employee_portal.main import health_check
        from fastapi.responses import JSONResponse

        with patch("employee_portal.main.check_db_connection", new_callable=AsyncMock) as mock_db:
            mock_db.return_value = False

            response = await health_check()

        assert isinstance(response, JSONResponse)
        assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE

    @pytest.mark.asyncio
    async def test_health_over_http(self, client):
        with patch("employee_portal.main.check_db_connection", new_callable=AsyncMock, return_value=True):
            response = await client.get("/health")

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["service"] == "employee-portal"


class TestRootEndpoint:
    """Test the welcome route."""

    @pytest.mark.asyncio
    async def test_root_welcome(self, client):
        response = await client.get("/")

        assert response.status_code == status.HTTP_200_OK
        assert "Employee Portal" in response.json()["message"]


class TestMiddleware:
    """Headers added to every response."""

    @pytest.mark.asyncio
    async def test_security_headers(self, client):
        response = await client.get("/")

        assert response.headers["X-Content-Type-Options"] == "nosniff"
        assert response.headers["X-Frame-Options"] == "DENY"
        assert response.headers["Referrer-Policy"] == "no-referrer"
        assert "Cache-Control" not in response.headers

    @pytest.mark.asyncio
    async def test_api_responses_not_cached(self, client, auth_headers):
        response = await client.get("/api/user", headers=auth_headers)

        assert response.headers["Cache-Control"] == "no-store"

    @pytest.mark.asyncio
    async def test_request_id_generated(self, client):
        response = await client.get("/")

        assert len(response.headers["X-Request-ID"]) == 12

    @pytest.mark.asyncio
    async def test_incoming_request_id_echoed(self, client):
        response = await client.get("/", headers={"X-Request-ID": "lb-7f3a.1"})

        assert response.headers["X-Request-ID"] == "lb-7f3a.1"

    @pytest.mark.asyncio
    async def test_malformed_request_id_replaced(self, client):
        response = await client.get("/", headers={"X-Request-ID": "bad id with spaces"})

        assert response.headers["X-Request-ID"] != "bad id with spaces"

    @pytest.mark.asyncio
    async def test_unknown_route_uses_message_body(self, client):
        response = await client.get("/api/nothing-here")

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json() == {"message": "Not Found"}


class TestUnhandledExceptionHandler:
    """Test the 500 handler."""

    @pytest.mark.asyncio
    async def test_generates_reference_id(self, mock_request):
        """Handler should return a reference id and the path."""
        from employee_portal.api.errors import unhandled_exception_handler

        response = await unhandled_exception_handler(mock_request, Exception("Test error"))

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        content = response.body.decode()
        assert "reference_id" in content
        assert "/api/employees" in content

    @pytest.mark.asyncio
    async def test_details_shown_in_debug(self, mock_request):
        from employee_portal.api.errors import unhandled_exception_handler

        response = await unhandled_exception_handler(mock_request, ValueError("Test error message"))

        content = response.body.decode()
        assert "ValueError" in content
        assert "Test error message" in content

    @pytest.mark.asyncio
    async def test_details_hidden_in_production(self, mock_request):
        """Outside development the body says nothing about the exception."""
        from employee_portal.api import errors

        with patch.object(errors, "settings", MagicMock(DEBUG=False, IS_PRODUCTION=True)):
            response = await errors.unhandled_exception_handler(mock_request, ValueError("db password is hunter2"))

        content = response.body.decode()
        assert "hunter2" not in content
        assert "ValueError" not in content
        assert "Server Error" in content

    @pytest.mark.asyncio
    async def test_unhandled_error_in_route_is_500(self, session_factory, seeded_user, credentials):
        """A crash inside a route still produces the JSON 500 body."""
        from employee_portal.main import app
        from employee_portal.api.deps import get_db, get_employee_service
        from employee_portal.core.rate_limiter import limiter

        async def override_get_db():
            async with session_factory() as session:
                yield session

        broken_service = MagicMock()
        broken_service.list_employees = AsyncMock(side_effect=RuntimeError("boom"))

        app.dependency_overrides[get_db] = override_get_db
        app.dependency_overrides[get_employee_service] = lambda: broken_service
        limiter.reset()
        try:
            transport = ASGITransport(app=app, raise_app_exceptions=False)
            async with AsyncClient(transport=transport, base_url="http://test") as ac:
                token = (await ac.post("/api/login", json=credentials)).json()["token"]
                response = await ac.get("/api/employees", headers={"Authorization": f"Bearer {token}"})
        finally:
            app.dependency_overrides.clear()

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        body = response.json()
        assert body["reference_id"]
        assert body["path"] == "/api/employees"


class TestRequestValidationHandler:
    """Malformed request bodies."""

    @pytest.mark.asyncio
    async def test_invalid_json_is_422_with_message(self, client):
        response = await client.post(
            "/api/login",
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
        assert response.json()["message"] == "The given data was invalid."
        assert response.json()["errors"]

"""
HTTP client for the Employee Portal API.
"""

import logging
from typing import Any, Dict, List, Optional

import httpx

from employee_portal.client.session import ClientSession

logger = logging.getLogger("employee_portal.client")


class ApiError(Exception):
    """Non-2xx API response."""

    def __init__(self, status_code: int, message: str, errors: Optional[Dict[str, List[str]]] = None):
        super().__init__(f"{status_code}: {message}")
        self.status_code = status_code
        self.message = message
        self.errors = errors or {}


class PortalClient:
    """
    Thin wrapper over the REST API.

    The session is explicit: login fills it, logout and any 401 clear it.
    """

    def __init__(
        self,
        session: ClientSession,
        timeout: float = 10.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.session = session
        self._http = httpx.Client(
            base_url=session.base_url.rstrip("/"),
            timeout=timeout,
            transport=transport,
            headers={"Accept": "application/json"},
        )

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> "PortalClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _request(self, method: str, path: str, **kwargs) -> httpx.Response:
        response = self._http.request(method, path, headers=self.session.auth_headers(), **kwargs)
        if response.status_code == 401 and self.session.is_authenticated:
            logger.info("Server rejected the stored token; clearing session")
            self.session.clear()
        if response.is_error:
            raise self._error_from(response)
        return response

    @staticmethod
    def _error_from(response: httpx.Response) -> ApiError:
        try:
            body = response.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {}
        return ApiError(
            status_code=response.status_code,
            message=body.get("message") or response.reason_phrase,
            errors=body.get("errors"),
        )

    # Auth

    def login(self, email: str, password: str) -> Dict[str, Any]:
        response = self._request("POST", "/login", json={"email": email, "password": password})
        body = response.json()
        self.session.start(body["token"], body["user"])
        return body["user"]

    def logout(self) -> None:
        """
        Revoke the token on the server if possible. The local session is
        cleared regardless of the server's answer.
        """
        try:
            if self.session.is_authenticated:
                self._request("POST", "/logout")
        except (ApiError, httpx.HTTPError) as e:
            logger.warning(f"Logout request failed: {e}")
        finally:
            self.session.clear()

    def current_user(self) -> Dict[str, Any]:
        user = self._request("GET", "/user").json()
        self.session.user = {k: user.get(k) for k in ("id", "name", "email")}
        return user

    # Employees

    def list_employees(self) -> List[Dict[str, Any]]:
        return self._request("GET", "/employees").json()["data"]

    def get_employee(self, employee_id: int) -> Dict[str, Any]:
        return self._request("GET", f"/employees/{employee_id}").json()["data"]

    def create_employee(self, fields: Dict[str, Any]) -> Dict[str, Any]:
        return self._request("POST", "/employees", json=fields).json()["data"]

    def update_employee(self, employee_id: int, fields: Dict[str, Any]) -> Dict[str, Any]:
        return self._request("PUT", f"/employees/{employee_id}", json=fields).json()["data"]

    def delete_employee(self, employee_id: int) -> None:
        self._request("DELETE", f"/employees/{employee_id}")

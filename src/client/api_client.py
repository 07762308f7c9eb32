"""
REST client for the employee records API
"""

import logging
from typing import Any, Dict, List, Optional

import httpx

from config.settings import EMPLOYEE_API_URL, CLIENT_TIMEOUT

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """Non-2xx response; message is the server's ``message`` field when present"""

    def __init__(self, status_code: int, message: str):
        super().__init__(message)
        self.status_code = status_code
        self.message = message

    @property
    def is_conflict(self) -> bool:
        return self.status_code == 409

    @property
    def is_not_found(self) -> bool:
        return self.status_code == 404


class EmployeeApiClient:
    """Thin async wrapper over /api/employees; one request per call, no retries"""

    def __init__(
        self,
        base_url: str = EMPLOYEE_API_URL,
        timeout: float = CLIENT_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.base_url = base_url.rstrip("/")
        self._client = httpx.AsyncClient(timeout=timeout, transport=transport)

    async def __aenter__(self) -> "EmployeeApiClient":
        return self

    async def __aexit__(self, *exc_info):
        await self.aclose()

    async def aclose(self):
        await self._client.aclose()

    async def list_employees(self) -> List[Dict[str, Any]]:
        return await self._request("GET", "")

    async def get_employee(self, employee_id: int) -> Dict[str, Any]:
        return await self._request("GET", f"/{employee_id}")

    async def create_employee(self, employee: Dict[str, Any]) -> Dict[str, Any]:
        return await self._request("POST", "", employee)

    async def update_employee(self, employee_id: int, changes: Dict[str, Any]) -> Dict[str, Any]:
        return await self._request("PUT", f"/{employee_id}", changes)

    async def delete_employee(self, employee_id: int):
        await self._request("DELETE", f"/{employee_id}")

    async def _request(self, method: str, path: str, data: Optional[Dict[str, Any]] = None) -> Any:
        url = f"{self.base_url}{path}"
        logger.debug(f"{method} {url}")

        try:
            response = await self._client.request(method, url, json=data)
        except httpx.HTTPError as e:
            raise ApiError(0, f"Could not reach the employee service: {e}") from e

        if response.status_code >= 400:
            raise ApiError(response.status_code, self._error_message(response))

        if response.status_code == 204 or not response.content:
            return None
        return response.json()

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            return response.text or f"HTTP {response.status_code}"
        if isinstance(body, dict) and body.get("message"):
            return str(body["message"])
        return f"HTTP {response.status_code}"

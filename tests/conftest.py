"""
pytest configuration and fixtures for the employee records test suite
The API runs in-process against an in-memory store; no database is needed.
"""

import sys
from pathlib import Path

import httpx
import pytest
import pytest_asyncio

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from app import create_app
from client.api_client import EmployeeApiClient
from database.memory_store import InMemoryEmployeeStore

BASE_URL = "http://testserver"
EMPLOYEES_URL = "/api/employees"


@pytest.fixture
def employee_payload():
    """Valid create body in wire format"""
    return {
        "firstName": "Ana",
        "lastName": "Ruiz",
        "email": "ana@x.com",
        "phone": "555-1234",
        "department": "IT",
    }


@pytest.fixture
def make_payload(employee_payload):
    """Build distinct valid bodies; email is made unique per index"""
    def _make(index: int, **overrides):
        payload = dict(employee_payload)
        payload["firstName"] = f"Employee{index}"
        payload["email"] = f"employee{index}@example.com"
        payload.update(overrides)
        return payload
    return _make


@pytest.fixture
def store():
    return InMemoryEmployeeStore()


@pytest.fixture
def api_app(store):
    return create_app(store=store)


@pytest_asyncio.fixture
async def http_client(api_app):
    """httpx client wired straight into the ASGI app"""
    transport = httpx.ASGITransport(app=api_app)
    async with httpx.AsyncClient(transport=transport, base_url=BASE_URL) as client:
        yield client


@pytest_asyncio.fixture
async def api_client(api_app):
    """EmployeeApiClient pointed at the in-process app"""
    transport = httpx.ASGITransport(app=api_app)
    async with EmployeeApiClient(base_url=f"{BASE_URL}{EMPLOYEES_URL}", transport=transport) as client:
        yield client

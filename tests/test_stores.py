"""
Record store tests: in-memory semantics, PostgreSQL query building and startup
"""

from contextlib import asynccontextmanager
from datetime import datetime, timezone

import asyncpg
import pytest

import app as app_module
from database.connection import EMPLOYEES_TABLE_DDL, create_db_pool, init_schema
from database.memory_store import InMemoryEmployeeStore
from database.store import (
    DuplicateRecordError,
    PostgresEmployeeStore,
    StoreUnavailableError,
    EMPLOYEE_FIELDS,
)

RECORD = {
    "first_name": "Ana",
    "last_name": "Ruiz",
    "email": "ana@x.com",
    "phone": "555-1234",
    "department": "IT",
}


class FakeConnection:
    """Records calls and returns canned results per asyncpg method"""

    def __init__(self, results=None, error=None):
        self.calls = []
        self.results = results or {}
        self.error = error

    async def _call(self, method, query, params):
        self.calls.append((method, " ".join(query.split()), params))
        if self.error:
            raise self.error
        return self.results.get(method)

    async def fetch(self, query, *params):
        return await self._call("fetch", query, params)

    async def fetchrow(self, query, *params):
        return await self._call("fetchrow", query, params)

    async def fetchval(self, query, *params):
        return await self._call("fetchval", query, params)

    async def execute(self, query, *params):
        return await self._call("execute", query, params)


class FakePool:
    def __init__(self, conn):
        self.conn = conn
        self.closed = False

    @asynccontextmanager
    async def acquire(self):
        yield self.conn

    async def close(self):
        self.closed = True


def _row(**overrides):
    now = datetime(2026, 1, 1, tzinfo=timezone.utc)
    return {"id": 1, **RECORD, "created_at": now, "updated_at": now, **overrides}


class TestInMemoryStore:

    @pytest.mark.asyncio
    async def test_create_sets_id_and_timestamps(self):
        store = InMemoryEmployeeStore()

        row = await store.create_employee(dict(RECORD))

        assert row["id"] == 1
        assert row["created_at"] == row["updated_at"]
        assert set(row) == set(EMPLOYEE_FIELDS)

    @pytest.mark.asyncio
    async def test_duplicate_email(self):
        store = InMemoryEmployeeStore()
        await store.create_employee(dict(RECORD))

        with pytest.raises(DuplicateRecordError):
            await store.create_employee(dict(RECORD, first_name="Other"))

        assert len(await store.list_employees()) == 1

    @pytest.mark.asyncio
    async def test_update_advances_updated_at(self):
        store = InMemoryEmployeeStore()
        created = await store.create_employee(dict(RECORD))

        updated = await store.update_employee(created["id"], {"department": "HR"})

        assert updated["department"] == "HR"
        assert updated["first_name"] == "Ana"
        assert updated["created_at"] == created["created_at"]
        assert updated["updated_at"] > created["updated_at"]

    @pytest.mark.asyncio
    async def test_returned_rows_are_copies(self):
        store = InMemoryEmployeeStore()
        created = await store.create_employee(dict(RECORD))

        created["first_name"] = "Mutated"

        assert (await store.get_employee(created["id"]))["first_name"] == "Ana"

    @pytest.mark.asyncio
    async def test_missing_ids(self):
        store = InMemoryEmployeeStore()

        assert await store.get_employee(1) is None
        assert await store.update_employee(1, {"department": "HR"}) is None
        assert await store.delete_employee(1) is False

    @pytest.mark.asyncio
    async def test_rejects_store_owned_fields(self):
        store = InMemoryEmployeeStore()

        with pytest.raises(ValueError):
            await store.create_employee(dict(RECORD, id=5))


class TestPostgresStore:

    @pytest.mark.asyncio
    async def test_list_orders_by_id(self):
        conn = FakeConnection({"fetch": [_row(), _row(id=2, email="b@x.com")]})
        store = PostgresEmployeeStore(FakePool(conn))

        rows = await store.list_employees()

        assert [row["id"] for row in rows] == [1, 2]
        method, query, params = conn.calls[0]
        assert method == "fetch"
        assert query.endswith("FROM employees ORDER BY id ASC")
        assert params == ()

    @pytest.mark.asyncio
    async def test_get_uses_parameter(self):
        conn = FakeConnection({"fetchrow": _row(id=7)})
        store = PostgresEmployeeStore(FakePool(conn))

        row = await store.get_employee(7)

        assert row["id"] == 7
        assert conn.calls[0][1].endswith("WHERE id = $1")
        assert conn.calls[0][2] == (7,)

    @pytest.mark.asyncio
    async def test_get_out_of_range_id_skips_query(self):
        conn = FakeConnection()
        store = PostgresEmployeeStore(FakePool(conn))

        assert await store.get_employee(0) is None
        assert await store.get_employee(2 ** 31) is None
        assert conn.calls == []

    @pytest.mark.asyncio
    async def test_insert_query(self):
        conn = FakeConnection({"fetchrow": _row()})
        store = PostgresEmployeeStore(FakePool(conn))

        await store.create_employee(dict(RECORD))

        _, query, params = conn.calls[0]
        assert query.startswith(
            "INSERT INTO employees (first_name, last_name, email, phone, department) "
            "VALUES ($1, $2, $3, $4, $5) RETURNING id,"
        )
        assert params == ("Ana", "Ruiz", "ana@x.com", "555-1234", "IT")

    @pytest.mark.asyncio
    async def test_update_query_touches_only_given_columns(self):
        conn = FakeConnection({"fetchrow": _row(department="HR")})
        store = PostgresEmployeeStore(FakePool(conn))

        row = await store.update_employee(3, {"department": "HR"})

        assert row["department"] == "HR"
        _, query, params = conn.calls[0]
        assert query.startswith("UPDATE employees SET department = $1, updated_at = NOW() WHERE id = $2")
        assert params == ("HR", 3)

    @pytest.mark.asyncio
    async def test_update_missing_row(self):
        store = PostgresEmployeeStore(FakePool(FakeConnection({"fetchrow": None})))

        assert await store.update_employee(3, {"department": "HR"}) is None

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status,expected", [("DELETE 1", True), ("DELETE 0", False)])
    async def test_delete_parses_status(self, status, expected):
        conn = FakeConnection({"execute": status})
        store = PostgresEmployeeStore(FakePool(conn))

        assert await store.delete_employee(4) is expected
        assert conn.calls[0][1:] == ("DELETE FROM employees WHERE id = $1", (4,))

    @pytest.mark.asyncio
    async def test_unique_violation_becomes_duplicate_error(self):
        conn = FakeConnection(error=asyncpg.UniqueViolationError("duplicate key value"))
        store = PostgresEmployeeStore(FakePool(conn))

        with pytest.raises(DuplicateRecordError):
            await store.create_employee(dict(RECORD))

    @pytest.mark.asyncio
    async def test_connection_failure_becomes_unavailable(self):
        conn = FakeConnection(error=ConnectionRefusedError("refused"))
        store = PostgresEmployeeStore(FakePool(conn))

        with pytest.raises(StoreUnavailableError):
            await store.list_employees()

    @pytest.mark.asyncio
    async def test_rejects_unknown_columns(self):
        conn = FakeConnection()
        store = PostgresEmployeeStore(FakePool(conn))

        with pytest.raises(ValueError):
            await store.update_employee(1, {"created_at": "2000-01-01"})
        assert conn.calls == []

    @pytest.mark.asyncio
    async def test_close_closes_pool(self):
        pool = FakePool(FakeConnection())

        await PostgresEmployeeStore(pool).close()

        assert pool.closed


class DdlFailingConnection(FakeConnection):
    """Answers the startup ping but rejects the table DDL"""

    async def execute(self, query, *params):
        self.calls.append(("execute", " ".join(query.split()), params))
        raise asyncpg.InsufficientPrivilegeError("permission denied for schema public")


class TestStartup:

    @pytest.fixture
    def fake_pool(self, monkeypatch):
        """Route asyncpg.create_pool to a FakePool and record its arguments"""
        pool = FakePool(FakeConnection({"fetchval": 1}))
        pool.create_args = None

        async def create_pool(dsn, **kwargs):
            pool.create_args = (dsn, kwargs)
            return pool

        monkeypatch.setattr(asyncpg, "create_pool", create_pool)
        return pool

    @pytest.mark.asyncio
    async def test_create_db_pool_pings_database(self, fake_pool):
        pool = await create_db_pool("postgresql://db/employees")

        assert pool is fake_pool
        assert fake_pool.create_args[0] == "postgresql://db/employees"
        assert fake_pool.conn.calls == [("fetchval", "SELECT 1", ())]

    @pytest.mark.asyncio
    async def test_init_schema_creates_employees_table(self):
        conn = FakeConnection()

        await init_schema(FakePool(conn))

        method, query, _ = conn.calls[0]
        assert method == "execute"
        assert query == " ".join(EMPLOYEES_TABLE_DDL.split())
        assert query.startswith("CREATE TABLE IF NOT EXISTS employees")
        assert "email VARCHAR(255) NOT NULL UNIQUE" in query

    @pytest.mark.asyncio
    async def test_build_store_memory_backend(self, fake_pool, monkeypatch):
        monkeypatch.setattr(app_module, "STORE_BACKEND", "memory")

        store = await app_module.build_store()

        assert isinstance(store, InMemoryEmployeeStore)
        assert fake_pool.create_args is None

    @pytest.mark.asyncio
    @pytest.mark.parametrize("auto_create,expected_calls", [
        (True, ["fetchval", "execute"]),
        (False, ["fetchval"]),
    ])
    async def test_build_store_postgres_backend(self, fake_pool, monkeypatch, auto_create, expected_calls):
        monkeypatch.setattr(app_module, "STORE_BACKEND", "postgres")
        monkeypatch.setattr(app_module, "DB_AUTO_CREATE_SCHEMA", auto_create)

        store = await app_module.build_store()

        assert isinstance(store, PostgresEmployeeStore)
        assert store.pool is fake_pool
        assert [call[0] for call in fake_pool.conn.calls] == expected_calls
        assert not fake_pool.closed

    @pytest.mark.asyncio
    async def test_build_store_closes_pool_when_schema_fails(self, fake_pool, monkeypatch):
        fake_pool.conn = DdlFailingConnection({"fetchval": 1})
        monkeypatch.setattr(app_module, "STORE_BACKEND", "postgres")
        monkeypatch.setattr(app_module, "DB_AUTO_CREATE_SCHEMA", True)

        with pytest.raises(asyncpg.InsufficientPrivilegeError):
            await app_module.build_store()

        assert fake_pool.closed

    @pytest.mark.asyncio
    async def test_unreachable_database_fails_startup(self, fake_pool, monkeypatch):
        fake_pool.conn = FakeConnection(error=ConnectionRefusedError("refused"))
        monkeypatch.setattr(app_module, "STORE_BACKEND", "postgres")

        with pytest.raises(ConnectionRefusedError):
            await app_module.build_store()

        assert fake_pool.closed

"""
Employee record store: the interface handed to request handlers and its
PostgreSQL implementation.

Records cross this boundary as plain dicts keyed by column name. The store owns
``id``, ``created_at`` and ``updated_at``; callers only ever pass the writable
columns listed in EMPLOYEE_WRITABLE_FIELDS.
"""

import logging
from typing import Any, Dict, List, Optional

import asyncpg

from database.connection import close_db_pool

logger = logging.getLogger(__name__)

EMPLOYEES_TABLE = "employees"

EMPLOYEE_WRITABLE_FIELDS = ("first_name", "last_name", "email", "phone", "department")
EMPLOYEE_FIELDS = ("id",) + EMPLOYEE_WRITABLE_FIELDS + ("created_at", "updated_at")

# Upper bound of a PostgreSQL SERIAL column
MAX_EMPLOYEE_ID = 2_147_483_647


class StoreError(RuntimeError):
    """Base class for record store failures"""


class DuplicateRecordError(StoreError):
    """A unique column (email) already holds the submitted value"""


class StoreUnavailableError(StoreError):
    """The underlying database could not complete the operation"""


def is_valid_employee_id(employee_id: int) -> bool:
    return 0 < employee_id <= MAX_EMPLOYEE_ID


def check_writable_fields(values: Dict[str, Any]):
    unknown = set(values) - set(EMPLOYEE_WRITABLE_FIELDS)
    if unknown:
        raise ValueError(f"Fields are not writable: {', '.join(sorted(unknown))}")


class EmployeeStore:
    """Async persistence interface for employee records"""

    async def list_employees(self) -> List[Dict[str, Any]]:
        raise NotImplementedError

    async def get_employee(self, employee_id: int) -> Optional[Dict[str, Any]]:
        raise NotImplementedError

    async def create_employee(self, values: Dict[str, Any]) -> Dict[str, Any]:
        raise NotImplementedError

    async def update_employee(self, employee_id: int, values: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        raise NotImplementedError

    async def delete_employee(self, employee_id: int) -> bool:
        raise NotImplementedError

    async def ping(self):
        raise NotImplementedError

    async def close(self):
        pass


class PostgresEmployeeStore(EmployeeStore):
    """Employee store backed by an asyncpg connection pool"""

    def __init__(self, pool: asyncpg.Pool):
        self.pool = pool
        self._columns = ", ".join(EMPLOYEE_FIELDS)

    async def list_employees(self) -> List[Dict[str, Any]]:
        query = f"SELECT {self._columns} FROM {EMPLOYEES_TABLE} ORDER BY id ASC"
        rows = await self._run("fetch", query)
        return [dict(row) for row in rows]

    async def get_employee(self, employee_id: int) -> Optional[Dict[str, Any]]:
        if not is_valid_employee_id(employee_id):
            return None
        query = f"SELECT {self._columns} FROM {EMPLOYEES_TABLE} WHERE id = $1"
        row = await self._run("fetchrow", query, employee_id)
        return dict(row) if row else None

    async def create_employee(self, values: Dict[str, Any]) -> Dict[str, Any]:
        query, params = self._build_insert_query(values)
        row = await self._run("fetchrow", query, *params)
        if not row:
            raise StoreUnavailableError("Insert operation failed - no data returned")
        return dict(row)

    async def update_employee(self, employee_id: int, values: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        if not is_valid_employee_id(employee_id):
            return None
        query, params = self._build_update_query(employee_id, values)
        row = await self._run("fetchrow", query, *params)
        return dict(row) if row else None

    async def delete_employee(self, employee_id: int) -> bool:
        if not is_valid_employee_id(employee_id):
            return False
        query = f"DELETE FROM {EMPLOYEES_TABLE} WHERE id = $1"
        result = await self._run("execute", query, employee_id)
        # asyncpg returns "DELETE N" where N is the number of rows
        deleted_count = int(result.split()[-1]) if result else 0
        return deleted_count > 0

    async def ping(self):
        await self._run("fetchval", "SELECT 1")

    async def close(self):
        await close_db_pool(self.pool)

    def _build_insert_query(self, values: Dict[str, Any]) -> tuple[str, List[Any]]:
        """Build a parameterized INSERT; timestamps come from column defaults"""
        check_writable_fields(values)
        field_names = list(values.keys())
        placeholders = [f"${index}" for index in range(1, len(field_names) + 1)]

        query = (
            f"INSERT INTO {EMPLOYEES_TABLE} ({', '.join(field_names)}) "
            f"VALUES ({', '.join(placeholders)}) "
            f"RETURNING {self._columns}"
        )
        return query, list(values.values())

    def _build_update_query(self, employee_id: int, values: Dict[str, Any]) -> tuple[str, List[Any]]:
        """Build a parameterized UPDATE that touches only the supplied columns"""
        check_writable_fields(values)
        params = []
        set_parts = []
        for field_name, value in values.items():
            params.append(value)
            set_parts.append(f"{field_name} = ${len(params)}")
        set_parts.append("updated_at = NOW()")

        params.append(employee_id)
        query = (
            f"UPDATE {EMPLOYEES_TABLE} SET {', '.join(set_parts)} "
            f"WHERE id = ${len(params)} "
            f"RETURNING {self._columns}"
        )
        return query, params

    async def _run(self, method: str, query: str, *params):
        logger.debug(f"Executing {method}: {query} with {len(params)} parameters")
        try:
            async with self.pool.acquire() as conn:
                return await getattr(conn, method)(query, *params)
        except asyncpg.UniqueViolationError as e:
            logger.warning(f"Unique constraint violation: {e}")
            raise DuplicateRecordError("An employee with this email already exists") from e
        except (asyncpg.PostgresError, asyncpg.InterfaceError, OSError) as e:
            logger.error(f"Database error: {e}", exc_info=True)
            raise StoreUnavailableError(f"Database operation failed: {e}") from e

"""
In-memory employee store for tests and local runs without PostgreSQL
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

from database.store import (
    EmployeeStore,
    DuplicateRecordError,
    check_writable_fields,
)

logger = logging.getLogger(__name__)


class InMemoryEmployeeStore(EmployeeStore):
    """Dict-backed store mirroring the constraints of the employees table"""

    def __init__(self):
        self._rows: Dict[int, Dict[str, Any]] = {}
        self._last_id = 0

    async def list_employees(self) -> List[Dict[str, Any]]:
        return [dict(self._rows[employee_id]) for employee_id in sorted(self._rows)]

    async def get_employee(self, employee_id: int) -> Optional[Dict[str, Any]]:
        row = self._rows.get(employee_id)
        return dict(row) if row else None

    async def create_employee(self, values: Dict[str, Any]) -> Dict[str, Any]:
        check_writable_fields(values)
        self._check_unique_email(values.get("email"))

        # Ids come from a counter so deleted ids are never handed out again
        self._last_id += 1
        now = datetime.now(timezone.utc)
        row = {"id": self._last_id, **values, "created_at": now, "updated_at": now}
        self._rows[row["id"]] = row
        logger.debug(f"Inserted employee {row['id']}")
        return dict(row)

    async def update_employee(self, employee_id: int, values: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        check_writable_fields(values)
        row = self._rows.get(employee_id)
        if row is None:
            return None
        if "email" in values:
            self._check_unique_email(values["email"], exclude_id=employee_id)

        row.update(values)
        now = datetime.now(timezone.utc)
        previous = row["updated_at"]
        row["updated_at"] = now if now > previous else previous + timedelta(microseconds=1)
        return dict(row)

    async def delete_employee(self, employee_id: int) -> bool:
        return self._rows.pop(employee_id, None) is not None

    async def ping(self):
        pass

    def _check_unique_email(self, email: Optional[str], exclude_id: Optional[int] = None):
        for employee_id, row in self._rows.items():
            if employee_id != exclude_id and row["email"] == email:
                raise DuplicateRecordError("An employee with this email already exists")

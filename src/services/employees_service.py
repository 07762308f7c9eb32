"""
Employees service - business logic for employee records
"""

import logging
from typing import Dict, Any

from fastapi import Request

from database.store import EmployeeStore, EMPLOYEE_WRITABLE_FIELDS
from services.base_service import BaseService, ServiceResult, VALIDATION_ERROR, RESOURCE_NOT_FOUND

logger = logging.getLogger(__name__)

NOT_FOUND_MESSAGE = "Empleado no encontrado"


class EmployeesService(BaseService):
    """Service for employee record operations"""

    def __init__(self, store: EmployeeStore):
        super().__init__(store, "employees")

    async def list_employees(self) -> ServiceResult:
        """Get every employee, ordered by id"""
        return await self._execute("list", self.store.list_employees)

    async def get_employee(self, employee_id: int) -> ServiceResult:
        """
        Get an employee by id

        Args:
            employee_id: Store-assigned integer id

        Returns:
            ServiceResult with one record, or RESOURCE_NOT_FOUND
        """
        return self._with_not_found_message(
            await self._execute("get", self.store.get_employee, employee_id)
        )

    async def create_employee(self, values: Dict[str, Any]) -> ServiceResult:
        """
        Create a new employee

        Args:
            values: Validated field values (snake_case keys)

        Returns:
            ServiceResult with the created record, or CONFLICT on a duplicate email
        """
        record = self._writable(values)
        missing = [field for field in EMPLOYEE_WRITABLE_FIELDS if not record.get(field)]
        if missing:
            return ServiceResult.fail(f"Missing required fields: {', '.join(missing)}", VALIDATION_ERROR)

        logger.info(f"Creating new employee: {record['email']}")
        return await self._execute("create", self.store.create_employee, record)

    async def update_employee(self, employee_id: int, updates: Dict[str, Any]) -> ServiceResult:
        """
        Apply a partial update; fields absent from updates keep their values

        Args:
            employee_id: Store-assigned integer id
            updates: Field values to change (snake_case keys)

        Returns:
            ServiceResult with the updated record
        """
        changes = self._writable(updates)
        if not changes:
            return ServiceResult.fail("No fields provided for update", VALIDATION_ERROR)

        empty = [field for field, value in changes.items() if value is None or value == ""]
        if empty:
            return ServiceResult.fail(f"Fields cannot be empty: {', '.join(empty)}", VALIDATION_ERROR)

        logger.info(f"Updating employee {employee_id}: {', '.join(changes)}")
        return self._with_not_found_message(
            await self._execute("update", self.store.update_employee, employee_id, changes)
        )

    async def delete_employee(self, employee_id: int) -> ServiceResult:
        """Delete an employee by id"""
        logger.info(f"Deleting employee {employee_id}")
        return self._with_not_found_message(
            await self._execute("delete", self.store.delete_employee, employee_id)
        )

    @staticmethod
    def _writable(values: Dict[str, Any]) -> Dict[str, Any]:
        # id and timestamps are owned by the store
        return {field: values[field] for field in EMPLOYEE_WRITABLE_FIELDS if field in values}

    @staticmethod
    def _with_not_found_message(result: ServiceResult) -> ServiceResult:
        if result.error_type == RESOURCE_NOT_FOUND:
            result.error = NOT_FOUND_MESSAGE
        return result


def get_employees_service(request: Request) -> EmployeesService:
    """FastAPI dependency: service bound to the store held by the application"""
    return EmployeesService(request.app.state.employee_store)

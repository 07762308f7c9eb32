"""
Employee form: local validation plus the create/update submission cycle
"""

import logging
from typing import Any, Dict, List, Optional

from client.api_client import ApiError, EmployeeApiClient
from client.list_query import EmployeeListQuery
from models.enums import Department, FormStatus
from utils.validation import (
    INVALID_EMAIL_MESSAGE,
    INVALID_PHONE_MESSAGE,
    is_valid_email,
    is_valid_phone,
)

logger = logging.getLogger(__name__)

FORM_FIELDS = ("firstName", "lastName", "email", "phone", "department")
REQUIRED_FIELDS_MESSAGE = "Please fill in all required fields"
INVALID_DEPARTMENT_MESSAGE = "Please select a valid department"
DUPLICATE_EMAIL_MESSAGE = "An employee with this email already exists"


def _text(value: Any) -> str:
    return str(value).strip() if value is not None else ""


def validate_employee_form(data: Dict[str, Any], partial: bool = False) -> List[str]:
    """
    Check presence and format before anything is sent to the server.

    Args:
        data: Form values keyed by JSON field name
        partial: Only check the fields that are present (edit forms)

    Returns:
        Error messages, empty when the form can be submitted
    """
    errors = []
    present = [field for field in FORM_FIELDS if field in data] if partial else list(FORM_FIELDS)

    if partial and not present:
        return ["No fields provided for update"]
    if any(not _text(data.get(field)) for field in present):
        errors.append(REQUIRED_FIELDS_MESSAGE)

    email = _text(data.get("email"))
    if "email" in present and email and not is_valid_email(email):
        errors.append(INVALID_EMAIL_MESSAGE)

    phone = _text(data.get("phone"))
    if "phone" in present and phone and not is_valid_phone(phone):
        errors.append(INVALID_PHONE_MESSAGE)

    department = _text(data.get("department"))
    if "department" in present and department and department not in {d.value for d in Department}:
        errors.append(INVALID_DEPARTMENT_MESSAGE)

    return errors


def empty_form() -> Dict[str, str]:
    return {
        "firstName": "",
        "lastName": "",
        "email": "",
        "phone": "",
        "department": Department.IT.value,
    }


class EmployeeForm:
    """
    Create form when ``employee`` is None, edit form otherwise.

    Status moves idle -> submitting -> success | error, and back to idle
    through ``acknowledge``. A failed submission keeps the entered values.
    """

    def __init__(
        self,
        api: EmployeeApiClient,
        list_query: EmployeeListQuery,
        employee: Optional[Dict[str, Any]] = None
    ):
        self.api = api
        self.list_query = list_query
        self.employee = employee
        self.data = empty_form()
        if employee:
            self.data.update({field: employee.get(field, "") for field in FORM_FIELDS})
        self.status = FormStatus.IDLE
        self.error: Optional[str] = None
        self.success_message: Optional[str] = None

    @property
    def is_edit(self) -> bool:
        return self.employee is not None

    def set_field(self, field: str, value: Any):
        if field not in FORM_FIELDS:
            raise KeyError(f"Unknown form field: {field}")
        self.data[field] = value

    async def submit(self) -> Optional[Dict[str, Any]]:
        """
        Validate locally, then send the request.

        Returns:
            The stored record on success, None when validation or the request failed
        """
        if self.status == FormStatus.SUBMITTING:
            raise RuntimeError("A submission is already in progress")

        self.error = None
        self.success_message = None

        payload = {field: _text(self.data.get(field)) for field in FORM_FIELDS}
        errors = validate_employee_form(payload)
        if errors:
            # Local validation failure never leaves the idle state
            self.error = errors[0]
            return None

        self.status = FormStatus.SUBMITTING
        try:
            if self.is_edit:
                saved = await self.api.update_employee(self.employee["id"], payload)
            else:
                saved = await self.api.create_employee(payload)
        except ApiError as e:
            self.status = FormStatus.ERROR
            self.error = DUPLICATE_EMAIL_MESSAGE if e.is_conflict else e.message
            logger.info(f"Employee form submission failed: {self.error}")
            return None

        self.list_query.invalidate()
        self.status = FormStatus.SUCCESS
        if self.is_edit:
            self.employee = saved
            self.success_message = "Employee updated successfully"
        else:
            self.data = empty_form()
            self.success_message = "Employee created successfully"
        return saved

    def acknowledge(self):
        """Dismiss the outcome notification and return to idle"""
        if self.status in (FormStatus.SUCCESS, FormStatus.ERROR):
            self.status = FormStatus.IDLE
            self.success_message = None


async def delete_employee(api: EmployeeApiClient, list_query: EmployeeListQuery, employee_id: int):
    """Delete a record and mark the cached list stale"""
    await api.delete_employee(employee_id)
    list_query.invalidate()

"""
Base service layer: runs store operations and folds failures into ServiceResult
"""

import logging
from typing import Dict, Any, List, Optional
from dataclasses import dataclass

from database.store import EmployeeStore, DuplicateRecordError, StoreError

logger = logging.getLogger(__name__)

VALIDATION_ERROR = "VALIDATION_ERROR"
RESOURCE_NOT_FOUND = "RESOURCE_NOT_FOUND"
CONFLICT = "CONFLICT"
DATABASE_ERROR = "DATABASE_ERROR"


@dataclass
class ServiceResult:
    """Result from service operation"""
    success: bool
    data: Optional[List[Dict[str, Any]]] = None
    count: int = 0
    error: Optional[str] = None
    error_type: Optional[str] = None

    @classmethod
    def ok(cls, data: List[Dict[str, Any]]) -> "ServiceResult":
        return cls(success=True, data=data, count=len(data))

    @classmethod
    def fail(cls, error: str, error_type: str) -> "ServiceResult":
        return cls(success=False, error=error, error_type=error_type)


class BaseService:
    """Wraps a record store so routes never see store exceptions"""

    def __init__(self, store: EmployeeStore, resource_name: str):
        self.store = store
        self.resource_name = resource_name

    async def _execute(self, operation: str, func, *args) -> ServiceResult:
        """
        Run a store call and translate its outcome

        Args:
            operation: Name used in log lines
            func: Store coroutine function
            *args: Arguments for func

        Returns:
            ServiceResult holding a list of records; a None or False outcome
            from the store becomes RESOURCE_NOT_FOUND
        """
        try:
            outcome = await func(*args)
        except DuplicateRecordError as e:
            logger.warning(f"{operation} on {self.resource_name} rejected: {e}")
            return ServiceResult.fail(str(e), CONFLICT)
        except StoreError as e:
            logger.error(f"{operation} on {self.resource_name} failed: {e}")
            return ServiceResult.fail(str(e), DATABASE_ERROR)

        if outcome is None or outcome is False:
            return ServiceResult.fail(f"{self.resource_name} record not found", RESOURCE_NOT_FOUND)
        if outcome is True:
            return ServiceResult.ok([])
        if isinstance(outcome, list):
            return ServiceResult.ok(outcome)
        return ServiceResult.ok([outcome])

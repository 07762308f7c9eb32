"""
Client-side cache of the employee list with explicit invalidation
"""

import logging
from typing import Any, Dict, List, Optional

from client.api_client import EmployeeApiClient

logger = logging.getLogger(__name__)


def matches_search(employee: Dict[str, Any], query: str) -> bool:
    """Case-insensitive substring match against every field of the record"""
    needle = query.lower()
    if not needle:
        return True
    return any(needle in str(value).lower() for value in employee.values())


class EmployeeListQuery:
    """
    Cached result of ``GET /api/employees``.

    The list starts stale. Any successful write must call ``invalidate`` so
    the next ``get`` refetches before the table is rendered again.
    """

    def __init__(self, api: EmployeeApiClient):
        self.api = api
        self._records: Optional[List[Dict[str, Any]]] = None
        self.stale = True
        self.fetch_count = 0

    def invalidate(self):
        self.stale = True

    async def get(self) -> List[Dict[str, Any]]:
        if self.stale or self._records is None:
            self._records = await self.api.list_employees()
            self.stale = False
            self.fetch_count += 1
            logger.debug(f"Fetched {len(self._records)} employees")
        return list(self._records)

    async def search(self, query: str) -> List[Dict[str, Any]]:
        """Filter the fetched records; never sends the query to the server"""
        return [employee for employee in await self.get() if matches_search(employee, query)]

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Tuple


class StoreError(Exception):
    """
    Raised when the hosted store rejects a query or cannot be reached.

    Attributes:
        action (str): What was being attempted, e.g. "insert into org_units".
        message (str): The store's (or transport's) error message.
    """

    def __init__(self, action: str, message: str):
        self.action = action
        self.message = message
        super().__init__(f"{action}: {message}")


class StoreAdapter(ABC):
    """Abstract base class for table-query store adapters."""

    @abstractmethod
    async def get_many(self, table: str, conditions: Dict[str, Any] = None, sort: List[Tuple[str, str]] = None,
                       limit: Optional[int] = None, columns: str = '*',
                       like: Dict[str, str] = None) -> List[Dict[str, Any]]:
        """
        Fetches the rows of `table` matching every condition.

        `sort` is a list of (column, 'ASC' | 'DESC'); `like` maps a column to a case-insensitive
        pattern; `columns` may embed related tables, e.g. "position, member:members(id, name)".
        """

    @abstractmethod
    async def get_count(self, table: str, conditions: Dict[str, Any] = None) -> int:
        """Counts the rows of `table` matching every condition."""

    @abstractmethod
    async def insert(self, table: str, data: Dict[str, Any]) -> Dict[str, Any]:
        """Inserts one row and returns it as stored."""

    @abstractmethod
    async def update(self, table: str, data: Dict[str, Any], conditions: Dict[str, Any]) -> List[Dict[str, Any]]:
        """Updates the rows matching every condition and returns them."""

    @abstractmethod
    async def delete(self, table: str, conditions: Dict[str, Any]) -> None:
        """Deletes the rows matching every condition."""

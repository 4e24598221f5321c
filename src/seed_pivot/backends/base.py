"""Base backend interface."""

from abc import ABC, abstractmethod
from typing import Any


class PivotBackend(ABC):
    """
    Base class for pivot row backends.

    A backend receives complete pivot rows (foreign keys, morph type and
    extra attributes already set) and persists them.
    """

    @abstractmethod
    def insert_rows(self, table: str, rows: list[dict[str, Any]]) -> list[dict[str, Any]]:
        """
        Insert rows into a pivot table.

        Args:
            table: Pivot table name
            rows: Row dicts, one per association

        Returns:
            The inserted rows
        """
        pass

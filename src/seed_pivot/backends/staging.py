"""Staging backend - in-memory backend for testing without database."""

from typing import Any

from seed_pivot.backends.base import PivotBackend


class StagingBackend(PivotBackend):
    """
    In-memory backend for populating pivot tables without database.

    Rows are copied and stored per table, in insertion order.

    Use case: Fast unit tests, offline development, prototyping seed logic.
    """

    def __init__(self):
        """Initialize staging backend with empty state."""
        self._data: dict[str, list[dict[str, Any]]] = {}

    def insert_rows(self, table: str, rows: list[dict[str, Any]]) -> list[dict[str, Any]]:
        """
        Simulate database insert (store in memory).

        Args:
            table: Pivot table name
            rows: List of row data

        Returns:
            Copies of the stored rows
        """
        if not rows:
            return []

        inserted_rows = [row.copy() for row in rows]
        self._data.setdefault(table, []).extend(inserted_rows)
        return inserted_rows

    def get_data(self, table: str) -> list[dict[str, Any]]:
        """
        Get in-memory data for inspection.

        Args:
            table: Table name

        Returns:
            List of row dicts for the table
        """
        return self._data.get(table, [])

    def clear(self):
        """Clear all in-memory data."""
        self._data.clear()

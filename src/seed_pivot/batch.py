"""Deferred bulk insertion of pivot rows.

Collects the rows built by PivotPopulator.get_insert_records() across many
parents and writes them in one pass per pivot table.

Example:
    >>> buffer = PivotInsertBuffer()
    >>> for post in posts:
    ...     buffer.collect(populator, post, inserted_keys)
    >>> buffer.flush(DirectBackend(conn, "public"))
"""

import logging
from typing import Any

from seed_pivot.backends.base import PivotBackend
from seed_pivot.models import InsertedKeys, PivotInsertRecords
from seed_pivot.populator import PivotPopulator

logger = logging.getLogger(__name__)

# (related type, pivot table, parent foreign key column)
GroupKey = tuple[str, str, str]


class PivotInsertBuffer:
    """
    Buffer of pivot rows waiting for their parent key.

    Rows are grouped by related type as well as table: inverse polymorphic
    relations write to the same table but must stay separate.
    """

    def __init__(self):
        self._groups: dict[GroupKey, list[tuple[Any, dict[str, Any]]]] = {}

    def add(self, parent_key: Any, records: PivotInsertRecords) -> None:
        """
        Buffer the rows built for one parent.

        Args:
            parent_key: Primary key of the parent the rows belong to
            records: Result of PivotPopulator.get_insert_records()
        """
        key = (records.related_type, records.table, records.foreign_pivot_key)
        group = self._groups.setdefault(key, [])
        group.extend((parent_key, row) for row in records.rows)

    def collect(self, populator: PivotPopulator, parent: Any, inserted_keys: InsertedKeys) -> None:
        """Build and buffer a parent's rows in one step."""
        records = populator.get_insert_records(parent, inserted_keys)
        self.add(populator.relation.parent_key(parent), records)

    def rows(self, related_type: str, table: str) -> list[dict[str, Any]]:
        """
        Get buffered rows with the parent key filled in.

        Args:
            related_type: Related record type
            table: Pivot table name

        Returns:
            Complete rows, in buffering order
        """
        rows = []
        for key in self._groups:
            if key[0] == related_type and key[1] == table:
                rows.extend(self._complete_rows(key))
        return rows

    def _complete_rows(self, key: GroupKey) -> list[dict[str, Any]]:
        foreign_pivot_key = key[2]
        return [
            {foreign_pivot_key: parent_key, **row} for parent_key, row in self._groups[key]
        ]

    def __len__(self) -> int:
        return sum(len(group) for group in self._groups.values())

    def flush(self, backend: PivotBackend) -> int:
        """
        Insert every buffered row and empty the buffer.

        Groups are written one at a time; if the backend fails, groups not yet
        written stay buffered.

        Args:
            backend: Backend to insert into

        Returns:
            Number of rows inserted
        """
        inserted = 0
        for key in list(self._groups):
            related_type, table, _ = key
            rows = self._complete_rows(key)
            backend.insert_rows(table, rows)
            del self._groups[key]

            logger.debug(f"Flushed {len(rows)} '{related_type}' rows into '{table}'")
            inserted += len(rows)

        return inserted

"""Direct INSERT backend - executes pivot inserts on a PostgreSQL connection."""

import logging
from typing import Any

from psycopg import Connection, sql

from seed_pivot.backends.base import PivotBackend

logger = logging.getLogger(__name__)


class DirectBackend(PivotBackend):
    """
    Insert pivot rows using multi-row INSERT statements.

    Pivot tables usually have no generated columns, so rows are returned as
    sent rather than read back with RETURNING.
    """

    def __init__(self, conn: Connection, schema: str, batch_size: int = 100):
        """
        Initialize backend.

        Args:
            conn: PostgreSQL connection
            schema: Schema name for qualified table names
            batch_size: Number of rows per INSERT statement
        """
        self.conn = conn
        self.schema = schema
        self.batch_size = batch_size

    def insert_rows(self, table: str, rows: list[dict[str, Any]]) -> list[dict[str, Any]]:
        """
        Insert rows in batches and commit.

        Rows are grouped by their column set, so a column missing from a row
        is left to its database DEFAULT rather than sent as NULL.

        Args:
            table: Pivot table name (unqualified)
            rows: List of row data

        Returns:
            The inserted rows

        Raises:
            psycopg.Error: If the database rejects the insert
        """
        if not rows:
            return []

        groups: dict[frozenset[str], list[dict[str, Any]]] = {}
        for row in rows:
            groups.setdefault(frozenset(row), []).append(row)

        with self.conn.cursor() as cur:
            for group in groups.values():
                columns = list(group[0])

                for i in range(0, len(group), self.batch_size):
                    batch = group[i : i + self.batch_size]

                    single_placeholder = sql.SQL("({})").format(
                        sql.SQL(", ").join(sql.Placeholder() * len(columns))
                    )
                    query = sql.SQL("INSERT INTO {table} ({columns}) VALUES {values}").format(
                        table=sql.Identifier(self.schema, table),
                        columns=sql.SQL(", ").join(map(sql.Identifier, columns)),
                        values=sql.SQL(", ").join([single_placeholder] * len(batch)),
                    )

                    # Flatten values: [row1_col1, row1_col2, row2_col1, row2_col2, ...]
                    values = [row[col] for row in batch for col in columns]
                    cur.execute(query, values)

        self.conn.commit()
        logger.debug(f"Inserted {len(rows)} rows into {self.schema}.{table}")
        return rows

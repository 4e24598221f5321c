"""Data models and type definitions."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, NamedTuple

if TYPE_CHECKING:
    from seed_pivot.backends import PivotBackend

logger = logging.getLogger(__name__)

# Record type → primary keys inserted so far in the run
InsertedKeys = Mapping[str, Sequence[Any]]


def bare_column(column: str) -> str:
    """
    Strip table qualification from a column name.

    Args:
        column: Column name, optionally qualified ("post_tag.tag_id")

    Returns:
        Segment after the last dot ("tag_id")
    """
    return column.rsplit(".", 1)[-1]


def record_value(record: Any, column: str) -> Any:
    """Read a column from a row dict or an attribute-style record."""
    if isinstance(record, Mapping):
        return record[column]
    return getattr(record, column)


@dataclass(frozen=True)
class Fixed:
    """Pivot attribute with a fixed value."""

    value: Any

    def evaluate(self, parent: Any, inserted_keys: InsertedKeys) -> Any:
        return self.value


@dataclass(frozen=True)
class Computed:
    """
    Pivot attribute computed per association.

    Attributes:
        fn: Called with (current parent record, full inserted-key catalog)
    """

    fn: Callable[[Any, InsertedKeys], Any]

    def evaluate(self, parent: Any, inserted_keys: InsertedKeys) -> Any:
        return self.fn(parent, inserted_keys)


AttributeValue = Fixed | Computed


def as_attribute(value: Any) -> AttributeValue:
    """
    Wrap a user-supplied value as a pivot attribute.

    Callables become Computed, anything else becomes Fixed. Values that are
    already wrapped are returned unchanged.

    Examples:
        >>> as_attribute(5)
        Fixed(value=5)
        >>> as_attribute(lambda parent, keys: parent["id"] * 2).evaluate({"id": 2}, {})
        4
    """
    if isinstance(value, (Fixed, Computed)):
        return value
    if callable(value):
        return Computed(value)
    return Fixed(value)


def as_attributes(values: Mapping[str, Any]) -> dict[str, AttributeValue]:
    """Wrap every value of a column → value mapping."""
    return {column: as_attribute(value) for column, value in values.items()}


@dataclass
class JoinRelation:
    """
    Many-to-many (optionally polymorphic) relation between two record types.

    Foreign-key names may be table-qualified; use foreign_pivot_column and
    related_pivot_column to get the bare column names.

    Attributes:
        parent_type: Record type owning the relation (e.g. "Post")
        related_type: Record type on the other side (e.g. "Tag")
        table: Pivot table name
        foreign_pivot_key: Pivot column referencing the parent
        related_pivot_key: Pivot column referencing the related record
        parent_key_name: Primary-key column of parent records
        morph_type: Discriminator column (polymorphic relations only)
        morph_class: Value stored in morph_type (polymorphic relations only)
        backend: Backend receiving the rows written by attach()
    """

    parent_type: str
    related_type: str
    table: str
    foreign_pivot_key: str
    related_pivot_key: str
    parent_key_name: str = "id"
    morph_type: str | None = None
    morph_class: str | None = None
    backend: PivotBackend | None = field(default=None, repr=False, compare=False)

    def __post_init__(self):
        if (self.morph_type is None) != (self.morph_class is None):
            raise ValueError(
                f"Relation '{self.parent_type}' → '{self.related_type}' must set both "
                f"morph_type and morph_class, or neither."
            )

    @property
    def is_polymorphic(self) -> bool:
        """True if the pivot table stores a morph type discriminator."""
        return self.morph_type is not None

    @property
    def foreign_pivot_column(self) -> str:
        return bare_column(self.foreign_pivot_key)

    @property
    def related_pivot_column(self) -> str:
        return bare_column(self.related_pivot_key)

    @property
    def key_columns(self) -> set[str]:
        """
        Pivot columns written by the relation itself.

        Returns:
            Bare foreign-key columns, plus the morph type column if polymorphic
        """
        columns = {self.foreign_pivot_column, self.related_pivot_column}
        if self.morph_type is not None:
            columns.add(self.morph_type)
        return columns

    def parent_key(self, parent: Any) -> Any:
        """Primary key of a parent record."""
        return record_value(parent, self.parent_key_name)

    def attach(
        self, parent_key: Any, values: Mapping[Any, Mapping[str, Any]]
    ) -> list[dict[str, Any]]:
        """
        Insert pivot rows linking a parent to related records.

        Foreign keys and morph type are set here; extra attributes must not
        contain them.

        Args:
            parent_key: Primary key of the parent record
            values: Related key → extra pivot attributes

        Returns:
            Rows as handed to the backend

        Raises:
            ValueError: If the relation has no backend
        """
        if self.backend is None:
            raise ValueError(
                f"Relation '{self.parent_type}' → '{self.related_type}' has no backend. "
                f"Pass backend=StagingBackend() or backend=DirectBackend(conn, schema)."
            )

        rows = []
        for related_key, extra in values.items():
            row = {
                self.foreign_pivot_column: parent_key,
                self.related_pivot_column: related_key,
            }
            if self.morph_type is not None:
                row[self.morph_type] = self.morph_class
            row.update(extra)
            rows.append(row)

        logger.debug(
            f"Attaching {len(rows)} '{self.related_type}' records to "
            f"'{self.parent_type}' {parent_key!r} via '{self.table}'"
        )
        return self.backend.insert_rows(self.table, rows)


class PivotInsertRecords(NamedTuple):
    """
    Buffered pivot rows for one parent, awaiting bulk insertion.

    Attributes:
        related_type: Related record type (disambiguates relations sharing a table)
        table: Pivot table name
        rows: Rows without the parent foreign key
        foreign_pivot_key: Bare column that will receive the parent key
    """

    related_type: str
    table: str
    rows: list[dict[str, Any]]
    foreign_pivot_key: str

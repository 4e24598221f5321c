"""Pivot table population for many-to-many relations.

A PivotPopulator is created once per relation and then invoked once per
parent record, after both sides of the relation have been seeded. It picks
how many related records to associate, samples them from the keys inserted
so far, and evaluates the extra pivot columns.

Example:
    >>> populator = PivotPopulator(builder, post_tags, FakerRandomSource(), {})
    >>> populator.set_quantity(2)
    >>> for post in posts:
    ...     populator.execute(post, inserted_keys)
"""

import logging
from collections.abc import Mapping, Sequence
from typing import Any, Protocol

from seed_pivot.exceptions import (
    InvalidQuantityError,
    MissingInsertedKeysError,
    QuantityExceedsAvailableError,
)
from seed_pivot.models import (
    AttributeValue,
    InsertedKeys,
    JoinRelation,
    PivotInsertRecords,
    as_attributes,
)
from seed_pivot.random_source import RandomSource

logger = logging.getLogger(__name__)


class ParentBuilder(Protocol):
    """Builder of the parent records, queried for the run mode."""

    def is_testing(self) -> bool:
        """True when random decisions must be replaced by maximal ones."""
        ...


class PivotPopulator:
    """Populate the pivot table of one many-to-many relation."""

    def __init__(
        self,
        parent_builder: ParentBuilder,
        relation: JoinRelation,
        random_source: RandomSource,
        guessed_formatters: Mapping[str, Any],
    ):
        """
        Initialize populator.

        Args:
            parent_builder: Builder of the relation's parent records
            relation: Relation whose pivot table is populated
            random_source: Random service for quantities and sampling
            guessed_formatters: Pivot column → value or callable(parent, inserted_keys),
                as guessed from the pivot table's columns. The relation's
                foreign keys and morph type are dropped, since attach() sets them.
        """
        self.parent_builder = parent_builder
        self.relation = relation
        self.random = random_source
        self._related_type = relation.related_type
        self._quantity: int | None = None
        self._guessed_formatters = self._without_key_columns(as_attributes(guessed_formatters))
        self._custom_attributes: dict[str, AttributeValue] = {}

    @property
    def related_type(self) -> str:
        """Record type on the related side of the relation."""
        return self._related_type

    def _without_key_columns(
        self, attributes: dict[str, AttributeValue]
    ) -> dict[str, AttributeValue]:
        key_columns = self.relation.key_columns
        return {column: value for column, value in attributes.items() if column not in key_columns}

    def set_quantity(self, quantity: int | None) -> None:
        """
        Set the number of related records to attach to each parent.

        Args:
            quantity: Exact count, or None for the default policy

        Raises:
            InvalidQuantityError: If quantity is not a non-negative integer
        """
        if quantity is not None and (
            isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 0
        ):
            raise InvalidQuantityError(quantity)
        self._quantity = quantity

    def set_custom_attributes(self, attributes: Mapping[str, Any]) -> None:
        """
        Override the guessed pivot formatters.

        Args:
            attributes: Pivot column → value or callable(parent, inserted_keys).
                Takes precedence over guessed formatters for the same column.
        """
        wrapped = as_attributes(attributes)

        ignored = sorted(set(wrapped) & self.relation.key_columns)
        if ignored:
            logger.warning(
                f"Ignoring custom attributes {ignored} on pivot table "
                f"'{self.relation.table}': they are set by the relation itself."
            )

        self._custom_attributes = self._without_key_columns(wrapped)

    def execute(self, current_parent: Any, inserted_keys: InsertedKeys) -> None:
        """
        Attach random related records to a parent.

        Args:
            current_parent: Parent record (row dict or object with attributes)
            inserted_keys: Record type → primary keys inserted so far

        Raises:
            MissingInsertedKeysError: If the related type has no catalog entry
            QuantityExceedsAvailableError: If the fixed quantity is too large
        """
        parent_key = self.relation.parent_key(current_parent)

        values = {
            related_key: self._extra_attributes(current_parent, inserted_keys)
            for related_key in self._pick_related_keys(inserted_keys)
        }

        self.relation.attach(parent_key, values)

    def get_insert_records(
        self, current_parent: Any, inserted_keys: InsertedKeys
    ) -> PivotInsertRecords:
        """
        Build pivot rows for a parent without inserting them.

        The parent foreign key is left out of the rows; the caller fills it in
        when flushing. Related keys are sampled anew on every call.

        Args:
            current_parent: Parent record (row dict or object with attributes)
            inserted_keys: Record type → primary keys inserted so far

        Returns:
            (related type, pivot table, rows, parent foreign key column)

        Raises:
            MissingInsertedKeysError: If the related type has no catalog entry
            QuantityExceedsAvailableError: If the fixed quantity is too large
        """
        related_column = self.relation.related_pivot_column

        rows = []
        for related_key in self._pick_related_keys(inserted_keys):
            row = {related_column: related_key}
            if self.relation.is_polymorphic:
                row[self.relation.morph_type] = self.relation.morph_class
            row.update(self._extra_attributes(current_parent, inserted_keys))
            rows.append(row)

        # Inverse polymorphic relations of one record type share a pivot table,
        # so the related type is returned to tell them apart.
        return PivotInsertRecords(
            related_type=self._related_type,
            table=self.relation.table,
            rows=rows,
            foreign_pivot_key=self.relation.foreign_pivot_column,
        )

    def _available_keys(self, inserted_keys: InsertedKeys) -> Sequence[Any]:
        try:
            return inserted_keys[self._related_type]
        except KeyError:
            raise MissingInsertedKeysError(self._related_type, self.relation.table) from None

    def _pick_related_keys(self, inserted_keys: InsertedKeys) -> list[Any]:
        """Sample distinct related keys to attach."""
        available = self._available_keys(inserted_keys)
        quantity = self._get_quantity(len(available))

        if quantity > len(available):
            raise QuantityExceedsAvailableError(quantity, len(available), self._related_type)

        logger.debug(
            f"Picking {quantity} of {len(available)} '{self._related_type}' keys "
            f"for pivot table '{self.relation.table}'"
        )
        return self.random.sample(available, quantity)

    def _get_quantity(self, available: int) -> int:
        """
        Get the number of related records to attach.

        Fixed quantity if set, every available record in test mode,
        otherwise a random count between 0 and all of them.
        """
        if self._quantity is not None:
            return self._quantity

        if self.parent_builder.is_testing():
            return available

        return self.random.uniform_int(0, available)

    def _extra_attributes(self, current_parent: Any, inserted_keys: InsertedKeys) -> dict[str, Any]:
        """Evaluate the extra pivot columns for one association."""
        if not self._guessed_formatters and not self._custom_attributes:
            return {}

        extra = {**self._guessed_formatters, **self._custom_attributes}

        return {
            column: value.evaluate(current_parent, inserted_keys)
            for column, value in extra.items()
        }

"""Custom exceptions with helpful error messages."""


class SeedPivotError(Exception):
    """Base exception for seed-pivot errors."""

    pass


class MissingInsertedKeysError(SeedPivotError, LookupError):
    """Related type has no entry in the inserted-key catalog."""

    def __init__(self, related_type: str, table: str):
        self.related_type = related_type
        super().__init__(
            f"No inserted keys recorded for '{related_type}' "
            f"while populating pivot table '{table}'.\n\n"
            f"Suggestions:\n"
            f"1. Seed '{related_type}' before populating its pivot tables\n"
            f"2. Record its primary keys: inserted_keys['{related_type}'] = [...]\n"
            f"3. Use an empty list if no '{related_type}' rows exist yet"
        )


class QuantityExceedsAvailableError(SeedPivotError, ValueError):
    """More associations requested than related keys are available."""

    def __init__(self, quantity: int, available: int, related_type: str):
        self.quantity = quantity
        self.available = available
        super().__init__(
            f"Cannot attach {quantity} '{related_type}' records: "
            f"only {available} have been inserted.\n\n"
            f"Suggestions:\n"
            f"1. Lower the quantity: populator.set_quantity({available})\n"
            f"2. Seed more '{related_type}' rows before populating the pivot table\n"
            f"3. Remove the fixed quantity to let it follow the available count"
        )


class InvalidQuantityError(SeedPivotError, ValueError):
    """Quantity is not a non-negative integer."""

    def __init__(self, quantity: object):
        super().__init__(
            f"Invalid pivot quantity {quantity!r}: expected a non-negative integer.\n\n"
            f"Suggestions:\n"
            f"1. Pass an int >= 0: populator.set_quantity(3)\n"
            f"2. Pass None to restore the default random quantity"
        )

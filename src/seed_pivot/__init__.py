"""
seed-pivot - Pivot Table Seeding for Many-to-Many Relations

Populates join tables with random associations between already-seeded
records, either immediately or as rows buffered for bulk insertion.
"""

from seed_pivot.backends import DirectBackend, PivotBackend, StagingBackend
from seed_pivot.batch import PivotInsertBuffer
from seed_pivot.config import Config
from seed_pivot.exceptions import (
    InvalidQuantityError,
    MissingInsertedKeysError,
    QuantityExceedsAvailableError,
    SeedPivotError,
)
from seed_pivot.models import (
    Computed,
    Fixed,
    JoinRelation,
    PivotInsertRecords,
    as_attribute,
    bare_column,
)
from seed_pivot.populator import ParentBuilder, PivotPopulator
from seed_pivot.random_source import FakerRandomSource, RandomSource

__version__ = "0.1.0"

__all__ = [
    "PivotPopulator",
    "ParentBuilder",
    "JoinRelation",
    "PivotInsertRecords",
    "PivotInsertBuffer",
    "Fixed",
    "Computed",
    "as_attribute",
    "bare_column",
    "RandomSource",
    "FakerRandomSource",
    "PivotBackend",
    "StagingBackend",
    "DirectBackend",
    "Config",
    "SeedPivotError",
    "MissingInsertedKeysError",
    "QuantityExceedsAvailableError",
    "InvalidQuantityError",
]

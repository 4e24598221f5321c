"""Backend implementations for pivot row persistence."""

from seed_pivot.backends.base import PivotBackend
from seed_pivot.backends.direct import DirectBackend
from seed_pivot.backends.staging import StagingBackend

__all__ = ["PivotBackend", "DirectBackend", "StagingBackend"]

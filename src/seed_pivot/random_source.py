"""Random decisions behind pivot population."""

from collections.abc import Sequence
from typing import Any, Protocol

from faker import Faker


class RandomSource(Protocol):
    """Random service used to pick quantities and related keys."""

    def uniform_int(self, low: int, high: int) -> int:
        """Uniform integer in [low, high], both ends inclusive."""
        ...

    def sample(self, population: Sequence[Any], k: int) -> list[Any]:
        """k distinct elements of population (k <= len(population))."""
        ...


class FakerRandomSource:
    """
    RandomSource backed by a Faker generator.

    Sharing the Faker instance used for column values keeps a whole seeding
    run reproducible from a single seed.

    Example:
        >>> source = FakerRandomSource(seed=42)
        >>> len(source.sample([1, 2, 3, 4, 5], 2))
        2
    """

    def __init__(self, faker: Faker | None = None, seed: int | None = None):
        """
        Initialize random source.

        Args:
            faker: Faker instance to draw from (a new one if omitted)
            seed: Seed applied to this instance only
        """
        self.faker = faker if faker is not None else Faker()
        if seed is not None:
            self.faker.seed_instance(seed)

    def uniform_int(self, low: int, high: int) -> int:
        return self.faker.random_int(min=low, max=high)

    def sample(self, population: Sequence[Any], k: int) -> list[Any]:
        if k == 0:
            return []
        return list(self.faker.random_elements(elements=list(population), length=k, unique=True))

"""
Configuration management for seed-pivot.

Loads and validates configuration from seed-pivot.toml files using Pydantic.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Optional

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from faker import Faker
from psycopg import Connection
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from seed_pivot.backends.direct import DirectBackend
from seed_pivot.random_source import FakerRandomSource

CONFIG_FILENAME = "seed-pivot.toml"


def _toml_string(value: str) -> str:
    """Quote a value as a TOML basic string."""
    return json.dumps(value, ensure_ascii=False)


class PopulatorConfig(BaseSettings):
    """Pivot population behaviour."""

    model_config = SettingsConfigDict(env_prefix="SEED_PIVOT_")

    testing: bool = Field(
        default=False,
        description="Attach every available related record instead of a random count",
    )
    faker_seed: Optional[int] = Field(
        default=None, description="Seed for reproducible random choices"
    )
    locale: str = Field(default="en_US", description="Faker locale")


class BulkConfig(BaseSettings):
    """Bulk insert configuration."""

    batch_size: int = Field(default=100, ge=1, description="Rows per INSERT statement")


class DatabaseConfig(BaseSettings):
    """Database configuration."""

    schema_name: str = Field(default="public", description="Schema holding the pivot tables")


class Config(BaseSettings):
    """Main configuration for seed-pivot."""

    populator: PopulatorConfig = Field(default_factory=PopulatorConfig)
    bulk: BulkConfig = Field(default_factory=BulkConfig)
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)

    @classmethod
    def from_toml(cls, path: Path | str) -> Config:
        """
        Load configuration from TOML file.

        Args:
            path: Path to seed-pivot.toml file

        Returns:
            Config instance

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If config file is invalid
        """
        config_path = Path(path)
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")

        with open(config_path, "rb") as f:
            data = tomllib.load(f)

        return cls(**data)

    @classmethod
    def find_and_load(cls, start_dir: Optional[Path] = None) -> Config:
        """
        Find and load configuration from seed-pivot.toml.

        Searches for seed-pivot.toml starting from start_dir and walking up
        parent directories until found or reaching filesystem root.

        Args:
            start_dir: Directory to start search (defaults to current directory)

        Returns:
            Config instance

        Raises:
            FileNotFoundError: If no config file found
        """
        if start_dir is None:
            start_dir = Path.cwd()

        current = Path(start_dir).resolve()

        # Walk up directory tree
        while True:
            config_path = current / CONFIG_FILENAME
            if config_path.exists():
                return cls.from_toml(config_path)

            parent = current.parent
            if parent == current:
                break
            current = parent

        raise FileNotFoundError(
            f"No {CONFIG_FILENAME} found in {start_dir} or parent directories."
        )

    def to_toml(self, path: Path | str) -> None:
        """
        Write configuration to TOML file.

        Args:
            path: Path to write seed-pivot.toml
        """
        seed_line = (
            f"faker_seed = {self.populator.faker_seed}\n"
            if self.populator.faker_seed is not None
            else ""
        )

        toml_content = f"""# seed-pivot configuration

[populator]
testing = {str(self.populator.testing).lower()}
{seed_line}locale = {_toml_string(self.populator.locale)}

[bulk]
batch_size = {self.bulk.batch_size}

[database]
schema_name = {_toml_string(self.database.schema_name)}
"""

        Path(path).write_text(toml_content, encoding="utf-8")

    def is_testing(self) -> bool:
        """Whether the run is in deterministic test mode."""
        return self.populator.testing

    def make_random_source(self) -> FakerRandomSource:
        """Random source using the configured locale and seed."""
        return FakerRandomSource(Faker(self.populator.locale), seed=self.populator.faker_seed)

    def make_backend(self, conn: Connection) -> DirectBackend:
        """Database backend using the configured schema and batch size."""
        return DirectBackend(conn, self.database.schema_name, batch_size=self.bulk.batch_size)


"""Pytest configuration and shared fixtures."""

import os

import psycopg
import pytest
from psycopg import Connection

from seed_pivot import FakerRandomSource, JoinRelation, StagingBackend


class StubParentBuilder:
    """Parent builder with a fixed run mode."""

    def __init__(self, testing: bool = False):
        self.testing = testing

    def is_testing(self) -> bool:
        return self.testing


@pytest.fixture
def builder() -> StubParentBuilder:
    """Parent builder in default (random) mode."""
    return StubParentBuilder(testing=False)


@pytest.fixture
def testing_builder() -> StubParentBuilder:
    """Parent builder in deterministic test mode."""
    return StubParentBuilder(testing=True)


@pytest.fixture
def random_source() -> FakerRandomSource:
    """Seeded random source so failures are reproducible."""
    return FakerRandomSource(seed=1234)


@pytest.fixture
def backend() -> StagingBackend:
    """In-memory pivot backend."""
    return StagingBackend()


@pytest.fixture
def post_tags(backend: StagingBackend) -> JoinRelation:
    """Post belongsToMany Tag through post_tag (qualified key names)."""
    return JoinRelation(
        parent_type="Post",
        related_type="Tag",
        table="post_tag",
        foreign_pivot_key="post_tag.post_id",
        related_pivot_key="post_tag.tag_id",
        backend=backend,
    )


@pytest.fixture
def tag_posts(backend: StagingBackend) -> JoinRelation:
    """Tag morphedByMany Post through taggables."""
    return JoinRelation(
        parent_type="Tag",
        related_type="Post",
        table="taggables",
        foreign_pivot_key="taggables.tag_id",
        related_pivot_key="taggables.taggable_id",
        morph_type="taggable_type",
        morph_class="post",
        backend=backend,
    )


@pytest.fixture
def tag_videos(backend: StagingBackend) -> JoinRelation:
    """Tag morphedByMany Video through the same taggables table."""
    return JoinRelation(
        parent_type="Tag",
        related_type="Video",
        table="taggables",
        foreign_pivot_key="taggables.tag_id",
        related_pivot_key="taggables.taggable_id",
        morph_type="taggable_type",
        morph_class="video",
        backend=backend,
    )


@pytest.fixture
def inserted_keys() -> dict[str, list[int]]:
    """Primary keys inserted earlier in the run."""
    return {
        "Post": [1, 2, 3],
        "Tag": [1, 2, 3, 4, 5],
        "Video": [10, 11, 12, 13],
    }


@pytest.fixture
def db_conn() -> Connection:
    """
    Provide a test database connection.

    Uses SEED_PIVOT_TEST_DSN, skipping the test if the database is unreachable.
    """
    dsn = os.getenv("SEED_PIVOT_TEST_DSN", "postgresql://localhost/seed_pivot_test")
    try:
        conn = psycopg.connect(dsn, autocommit=False, connect_timeout=3)
    except psycopg.OperationalError as e:
        pytest.skip(f"PostgreSQL not available: {e}")

    yield conn

    # Rollback any changes
    conn.rollback()
    conn.close()


@pytest.fixture
def test_schema(db_conn: Connection) -> str:
    """
    Create a test schema with posts, tags and their pivot table.

    Returns the schema name.
    """
    schema_name = "test_seed_pivot"

    with db_conn.cursor() as cur:
        cur.execute(f"DROP SCHEMA IF EXISTS {schema_name} CASCADE")
        cur.execute(f"CREATE SCHEMA {schema_name}")

        cur.execute(f"""
            CREATE TABLE {schema_name}.posts (
                id INTEGER GENERATED ALWAYS AS IDENTITY PRIMARY KEY,
                title TEXT NOT NULL
            )
        """)

        cur.execute(f"""
            CREATE TABLE {schema_name}.tags (
                id INTEGER GENERATED ALWAYS AS IDENTITY PRIMARY KEY,
                name TEXT NOT NULL
            )
        """)

        cur.execute(f"""
            CREATE TABLE {schema_name}.post_tag (
                post_id INTEGER NOT NULL REFERENCES {schema_name}.posts(id),
                tag_id INTEGER NOT NULL REFERENCES {schema_name}.tags(id),
                note TEXT,
                created_at TIMESTAMPTZ NOT NULL DEFAULT now(),
                PRIMARY KEY (post_id, tag_id)
            )
        """)

        cur.execute(
            f"INSERT INTO {schema_name}.posts (title) VALUES ('first'), ('second'), ('third')"
        )
        cur.execute(
            f"INSERT INTO {schema_name}.tags (name) "
            f"VALUES ('red'), ('green'), ('blue'), ('cyan'), ('magenta')"
        )

        db_conn.commit()

    yield schema_name

    # Cleanup
    db_conn.rollback()
    with db_conn.cursor() as cur:
        cur.execute(f"DROP SCHEMA IF EXISTS {schema_name} CASCADE")
        db_conn.commit()

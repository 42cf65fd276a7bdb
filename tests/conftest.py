"""
Root Pytest Fixtures.

Shared fixtures available to all test types.

Test Database Configuration:
    Tests never need a MySQL server. The connection manager takes an
    engine factory, and tests pass one that ignores the MySQL URL and
    returns an in-memory SQLite engine instead. The CREATE DATABASE step
    is MySQL-only, so the rest of the connect sequence runs unchanged.
"""

from collections.abc import AsyncGenerator, Callable
from typing import Any

import pytest
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine
from sqlalchemy.pool import StaticPool

from burpnote.backend.core.config_schema import DatabaseSchema, FeaturesSchema, TlsSchema
from burpnote.backend.core.database import ConnectionManager
from burpnote.backend.schemas.note import ConnectionParams

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


# =============================================================================
# Configuration Fixtures
# =============================================================================


@pytest.fixture
def db_config() -> DatabaseSchema:
    """Database settings matching config/settings/database.yaml."""
    return DatabaseSchema(
        driver="mysql+aiomysql",
        host="localhost",
        port=3306,
        name="burp_db",
        user="root",
        charset="utf8mb4",
        collation="utf8mb4_unicode_ci",
        server_timezone="+00:00",
        pool_recycle=1800,
        pool_pre_ping=False,
        echo=False,
        tls=TlsSchema(enabled=False, verify=True),
    )


@pytest.fixture
def features_config() -> FeaturesSchema:
    """Feature flags with the shipped defaults."""
    return FeaturesSchema(
        delete_missing_is_error=True,
        confirm_before_delete=True,
        preview_length=80,
    )


@pytest.fixture
def connection_params() -> ConnectionParams:
    """Connection form values as the panel would submit them."""
    return ConnectionParams(
        host="localhost",
        port="3306",
        database="burp_db",
        user="root",
        password="secret",
    )


# =============================================================================
# Database Engine Fixtures
# =============================================================================


@pytest.fixture
def sqlite_engine_factory() -> Callable[..., AsyncEngine]:
    """
    Engine factory for ConnectionManager backed by in-memory SQLite.

    MySQL-specific arguments (URL, init_command, pool_recycle) are
    ignored. Each call returns a new, empty database.
    """

    def factory(url: Any, **kwargs: Any) -> AsyncEngine:
        return create_async_engine(
            TEST_DATABASE_URL,
            echo=False,
            poolclass=StaticPool,
            connect_args={"check_same_thread": False},
        )

    return factory


@pytest.fixture
async def connections(
    db_config: DatabaseSchema,
    connection_params: ConnectionParams,
    sqlite_engine_factory: Callable[..., AsyncEngine],
) -> AsyncGenerator[ConnectionManager, None]:
    """
    A ConnectionManager connected to a fresh SQLite database.

    The schema is created by the regular connect sequence.
    """
    manager = ConnectionManager(db_config, sqlite_engine_factory)
    await manager.connect(connection_params)
    yield manager
    await manager.disconnect()


@pytest.fixture
async def db_session(connections: ConnectionManager) -> AsyncGenerator[AsyncSession, None]:
    """
    Provide a committing session on the connected test database.

    Usage:
        async def test_insert(db_session: AsyncSession):
            affected = await NoteRepository(db_session).insert("a.com", "x")
            assert affected == 1
    """
    async with connections.session() as session:
        yield session

"""
Unit Test Fixtures.

Fixtures for unit tests - all external dependencies are mocked.
Unit tests should be fast and isolated, never touching real databases.
"""

from contextlib import asynccontextmanager
from unittest.mock import AsyncMock, MagicMock

import pytest


# =============================================================================
# Database Mock Fixtures
# =============================================================================


@pytest.fixture
def mock_db_session() -> AsyncMock:
    """
    Mock database session for unit tests.

    Provides a fully mocked AsyncSession with common methods.
    """
    session = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.execute = AsyncMock()
    session.add = MagicMock()
    return session


@pytest.fixture
def mock_connections(mock_db_session: AsyncMock) -> MagicMock:
    """
    Mock ConnectionManager in the Connected state.

    session() yields mock_db_session. Set is_connected to False to
    simulate the Disconnected state, or probe.return_value to False to
    simulate a dropped connection.

    Usage:
        def test_service(mock_connections):
            service = NoteService(mock_connections)
    """
    connections = MagicMock()
    connections.is_connected = True
    connections.probe = AsyncMock(return_value=True)
    connections.disconnect = AsyncMock()

    @asynccontextmanager
    async def session():
        yield mock_db_session

    connections.session = session
    return connections


def make_mock_engine(dialect: str = "sqlite") -> MagicMock:
    """
    Mock AsyncEngine for ConnectionManager tests.

    engine.begin() works as an async context manager whose connection
    has awaitable execute() and run_sync().
    """
    engine = MagicMock()
    engine.dialect.name = dialect
    engine.dialect.identifier_preparer.quote.side_effect = lambda name: f"`{name}`"
    engine.dispose = AsyncMock()
    conn = AsyncMock()
    engine.begin.return_value.__aenter__.return_value = conn
    engine.begin.return_value.__aexit__.return_value = False
    engine.connect.return_value.__aenter__.return_value = conn
    engine.connect.return_value.__aexit__.return_value = False
    engine.conn = conn
    return engine


@pytest.fixture
def mock_engine_factory() -> MagicMock:
    """
    Engine factory returning a fresh mock engine per call.

    Inspect mock_engine_factory.engines for the engines handed out, in
    call order (server-scoped engine first, then the database engine).
    """
    engines: list[MagicMock] = []

    def create(url, **kwargs):
        engine = make_mock_engine(factory.dialect)
        engine.url = url
        engines.append(engine)
        return engine

    factory = MagicMock(side_effect=create)
    factory.dialect = "sqlite"
    factory.engines = engines
    return factory

"""
Database Connection Management.

Owns the single live SQLAlchemy async engine. The manager is a two-state
machine, Disconnected or Connected(engine). Connecting always disposes the
previous engine first, and a failed connect leaves the manager Disconnected.

Connect sequence:
    1. CREATE DATABASE IF NOT EXISTS on a server-scoped engine (MySQL only)
    2. Create the database-scoped engine
    3. CREATE TABLE IF NOT EXISTS for every model
"""

from collections.abc import AsyncGenerator, Callable
from contextlib import asynccontextmanager

from sqlalchemy import text
from sqlalchemy.engine import URL
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from burpnote.backend.core.config import build_connect_args, build_database_url
from burpnote.backend.core.config_schema import DatabaseSchema
from burpnote.backend.core.exceptions import (
    DatabaseConnectionError,
    NotConnectedError,
    ValidationError,
)
from burpnote.backend.core.logging import get_logger
from burpnote.backend.models.base import Base
from burpnote.backend.schemas.note import ConnectionParams

logger = get_logger(__name__)

EngineFactory = Callable[..., AsyncEngine]


def error_message(exc: BaseException) -> str:
    """Return the driver's own message when SQLAlchemy wrapped one."""
    orig = getattr(exc, "orig", None)
    return str(orig) if orig is not None else str(exc)


class ConnectionManager:
    """
    Holds the current database connection for the plugin.

    Usage:
        manager = ConnectionManager(get_app_config().database)
        await manager.connect(ConnectionParams(host="localhost", port="3306", ...))

        async with manager.session() as session:
            ...
    """

    def __init__(
        self,
        db_config: DatabaseSchema,
        engine_factory: EngineFactory = create_async_engine,
    ) -> None:
        self._db_config = db_config
        self._engine_factory = engine_factory
        self._engine: AsyncEngine | None = None
        self._session_factory: async_sessionmaker[AsyncSession] | None = None
        self._url: URL | None = None

    @property
    def is_connected(self) -> bool:
        """True while an engine is installed."""
        return self._engine is not None

    @property
    def url(self) -> URL | None:
        """URL of the current connection, if any."""
        return self._url

    def _validate(self, params: ConnectionParams) -> int:
        """
        Check required fields and parse the port.

        Raises:
            ValidationError: If host, port or database is blank, or port is not a number
        """
        fields = {
            "host": params.host,
            "port": params.port,
            "database": params.database,
        }
        missing = [name for name, value in fields.items() if not value.strip()]
        if missing:
            raise ValidationError(
                "Please fill in all connection details.",
                details={"missing_fields": missing},
            )
        try:
            return int(params.port.strip())
        except ValueError:
            raise ValidationError(
                f"Invalid port: {params.port.strip()}",
                details={"port": "Must be a number"},
            )

    def _create_engine(self, url: URL) -> AsyncEngine:
        return self._engine_factory(
            url,
            connect_args=build_connect_args(self._db_config),
            pool_recycle=self._db_config.pool_recycle,
            pool_pre_ping=self._db_config.pool_pre_ping,
            echo=self._db_config.echo,
        )

    async def _ensure_database(self, server_url: URL, database: str) -> None:
        """Create the target database on the server if it does not exist yet."""
        server_engine = self._create_engine(server_url)
        try:
            if server_engine.dialect.name != "mysql":
                return
            quoted = server_engine.dialect.identifier_preparer.quote(database)
            async with server_engine.begin() as conn:
                await conn.execute(text(
                    f"CREATE DATABASE IF NOT EXISTS {quoted} "
                    f"CHARACTER SET {self._db_config.charset} "
                    f"COLLATE {self._db_config.collation}"
                ))
        finally:
            await server_engine.dispose()

    async def connect(self, params: ConnectionParams) -> None:
        """
        Open a connection to the database described by params.

        Raises:
            ValidationError: Before any I/O, if a required field is blank
            DatabaseConnectionError: If any connect step fails
        """
        port = self._validate(params)
        host = params.host.strip()
        database = params.database.strip()
        user = params.user.strip()

        await self.disconnect()

        server_url = build_database_url(self._db_config, host, port, user, params.password)
        db_url = build_database_url(self._db_config, host, port, user, params.password, database)

        engine: AsyncEngine | None = None
        try:
            await self._ensure_database(server_url, database)
            engine = self._create_engine(db_url)
            async with engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
        except (SQLAlchemyError, OSError) as e:
            if engine is not None:
                await engine.dispose()
            logger.warning(
                "Database connection failed",
                extra={"url": db_url.render_as_string(hide_password=True), "error": error_message(e)},
            )
            raise DatabaseConnectionError(error_message(e)) from e

        self._engine = engine
        self._url = db_url
        self._session_factory = async_sessionmaker(
            engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )
        logger.info(
            "Database connected",
            extra={"url": db_url.render_as_string(hide_password=True)},
        )

    async def disconnect(self) -> None:
        """Dispose the current engine, if any. Safe to call when disconnected."""
        engine = self._engine
        self._engine = None
        self._session_factory = None
        self._url = None
        if engine is not None:
            await engine.dispose()
            logger.info("Database disconnected")

    async def probe(self) -> bool:
        """
        Check whether the connection is still usable.

        A failed probe disconnects, so later operations fail fast with
        NotConnectedError instead of timing out against a dead server.
        """
        if self._engine is None:
            return False
        try:
            async with self._engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            return True
        except (SQLAlchemyError, OSError) as e:
            logger.warning("Connection probe failed", extra={"error": error_message(e)})
            await self.disconnect()
            return False

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """
        Provide a session on the current connection.

        Commits on success and rolls back on error.

        Raises:
            NotConnectedError: If no connection is established
        """
        if self._session_factory is None:
            raise NotConnectedError()
        async with self._session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

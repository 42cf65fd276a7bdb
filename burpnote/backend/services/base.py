"""
Base Service.

Base class for all services providing common patterns for business logic.
Services validate input, open a session on the current connection,
delegate to repositories, and translate database failures.

Usage:
    from burpnote.backend.services.base import BaseService

    class NoteService(BaseService):
        async def insert_note(self, domain: str, content: str) -> None:
            self._validate_required({"content": content}, ["content"])
            await self._execute_db_operation(
                "insert_note",
                lambda session: NoteRepository(session).insert(domain, content),
            )
"""

from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from burpnote.backend.core.database import ConnectionManager, error_message
from burpnote.backend.core.exceptions import QueryError, ValidationError
from burpnote.backend.core.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


class BaseService:
    """
    Base class for all services.

    Provides:
    - Access to the connection manager
    - Logging context
    - Error wrapping for database operations
    - Common validation patterns

    Subclasses should:
    - Call super().__init__(connections) in their __init__
    - Implement business logic methods
    """

    def __init__(self, connections: ConnectionManager) -> None:
        """
        Initialize the service with the connection manager.

        Args:
            connections: Owner of the current database connection
        """
        self._connections = connections
        self._logger = get_logger(self.__class__.__module__)

    @property
    def connections(self) -> ConnectionManager:
        """Get the connection manager."""
        return self._connections

    async def _execute_db_operation(
        self,
        operation: str,
        work: Callable[[AsyncSession], Awaitable[T]],
    ) -> T:
        """
        Run work inside a session, converting SQLAlchemy failures.

        After a failure the connection is probed so callers can tell a
        failed statement from a dropped connection.

        Args:
            operation: Description of the operation for logging
            work: Coroutine function receiving the session

        Returns:
            Result of work

        Raises:
            NotConnectedError: If no connection is established
            QueryError: If the statement fails (message kept verbatim)
        """
        try:
            async with self._connections.session() as session:
                return await work(session)
        except SQLAlchemyError as e:
            message = error_message(e)
            self._logger.error(
                "Database error",
                extra={"operation": operation, "error": message},
            )
            alive = await self._connections.probe()
            raise QueryError(message, connection_lost=not alive) from e

    def _validate_required(
        self,
        fields: dict[str, Any],
        field_names: list[str],
        message: str = "Required fields missing",
    ) -> None:
        """
        Validate that required fields are present and not empty.

        Args:
            fields: Dictionary of field names to values
            field_names: List of required field names
            message: Error message shown to the user

        Raises:
            ValidationError: If any required field is missing or empty
        """
        missing = []
        for name in field_names:
            value = fields.get(name)
            if value is None or (isinstance(value, str) and not value.strip()):
                missing.append(name)

        if missing:
            raise ValidationError(
                message,
                details={"missing_fields": missing},
            )

    def _log_operation(
        self,
        operation: str,
        **context: Any,
    ) -> None:
        """
        Log a service operation with context.

        Args:
            operation: Description of the operation
            **context: Additional context to include in log
        """
        self._logger.info(
            operation,
            extra={"service": self.__class__.__name__, **context},
        )

    def _log_debug(
        self,
        message: str,
        **context: Any,
    ) -> None:
        """
        Log debug information.

        Args:
            message: Debug message
            **context: Additional context to include in log
        """
        self._logger.debug(
            message,
            extra={"service": self.__class__.__name__, **context},
        )

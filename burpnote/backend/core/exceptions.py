"""
Custom Exceptions.

Application-specific exception classes for consistent error handling.
"""


class ApplicationError(Exception):
    """Base exception for all application errors."""

    def __init__(self, message: str, code: str = "SYS_INTERNAL_ERROR") -> None:
        self.message = message
        self.code = code
        super().__init__(self.message)


class ValidationError(ApplicationError):
    """Raised when a required field is empty. Always raised before any I/O."""

    def __init__(self, message: str = "Validation failed", details: dict | None = None) -> None:
        self.details = details or {}
        super().__init__(message, code="VAL_VALIDATION_ERROR")


class DatabaseConnectionError(ApplicationError):
    """Raised when connecting or creating the schema fails."""

    def __init__(self, message: str = "Database connection failed") -> None:
        super().__init__(message, code="DB_CONNECTION_FAILED")


class NotConnectedError(ApplicationError):
    """Raised when a store operation is attempted without a connection."""

    def __init__(self, message: str = "Not connected to database.") -> None:
        super().__init__(message, code="DB_NOT_CONNECTED")


class QueryError(ApplicationError):
    """
    Raised when a statement fails.

    connection_lost is set when the liveness probe that follows the
    failure found the connection closed.
    """

    def __init__(self, message: str = "Database error", connection_lost: bool = False) -> None:
        self.connection_lost = connection_lost
        super().__init__(message, code="DB_QUERY_FAILED")


class NotFoundError(ApplicationError):
    """Raised when a delete affected no rows."""

    def __init__(self, message: str = "Resource not found") -> None:
        super().__init__(message, code="RES_NOT_FOUND")

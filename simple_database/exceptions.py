"""
Exception hierarchy for the simple database library.

Every error raised by the pool, the façade and the query builder derives
from DatabaseError, so callers can catch the whole family with one clause.
The underlying driver exception is always chained as ``__cause__`` and is
also available as ``cause``.
"""

from typing import Optional


class DatabaseError(Exception):
    """Base class for all library errors."""

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.message = message
        self.cause = cause
        if cause is not None:
            self.__cause__ = cause


class ConfigurationError(DatabaseError):
    """Raised when a database configuration is incomplete or invalid."""
    pass


class DatabaseConnectionError(DatabaseError):
    """
    Raised when a connection cannot be created, validated or acquired.

    Also raised by any acquire on a pool that has been closed.
    """
    pass


class QueryError(DatabaseError):
    """
    Raised when a statement fails to prepare or execute.

    Attributes:
        sql: The SQL text that was attempted (None if no SQL was built)
        error_type: "permanent", "transient" or "systemic" classification
            of the underlying cause, None when there is no cause
    """

    def __init__(
        self,
        message: str,
        cause: Optional[BaseException] = None,
        sql: Optional[str] = None,
        error_type: Optional[str] = None,
    ):
        super().__init__(message, cause)
        self.sql = sql
        self.error_type = error_type


class TransactionError(DatabaseError):
    """
    Raised when a transactional operation or its commit fails.

    The original failure is the primary cause. If the rollback that followed
    also failed, that secondary failure is kept in ``rollback_error``.
    """

    def __init__(
        self,
        message: str,
        cause: Optional[BaseException] = None,
        rollback_error: Optional[BaseException] = None,
    ):
        super().__init__(message, cause)
        self.rollback_error = rollback_error

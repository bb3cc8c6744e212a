"""
Database façade module.

This module provides Database, the main entry point of the library. It runs
single statements on a pooled connection and runs callables inside a
transaction. Nested transactions on one thread are flattened onto the
outermost commit/rollback boundary.
"""

import logging
import time
from functools import wraps
from typing import Any, Callable, Mapping, Optional, Sequence, TypeVar

from ..config.env import Env
from ..exceptions import ConfigurationError, DatabaseConnectionError, QueryError, TransactionError
from ..models import DatabaseConfig, QueryResult
from ..utils.logging import log_transaction_commit, log_transaction_rollback
from .builder import QueryBuilder
from .config import create_pool_config
from .drivers import DriverConnection
from .pool import ConnectionPool
from .transaction import TransactionContext
from .utils import classify_database_error

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Database:
    """
    High-level API for executing statements and managing transactions.

    Example:
        with Database(config) as db:
            db.execute("CREATE TABLE users (id INTEGER, name TEXT)")

            def add_users():
                db.insert("users", {"id": 1, "name": "Ada"})
                db.insert("users", {"id": 2, "name": "Grace"})

            db.transaction(add_users)
            names = db.select("users").column("name")
    """

    def __init__(self, config: DatabaseConfig):
        """
        Create the connection pool for ``config``.

        Raises:
            DatabaseConnectionError: If the configuration is invalid or the
                pool cannot be initialized
        """
        self._config = config
        try:
            pool_config = create_pool_config(config)
        except ConfigurationError as e:
            raise DatabaseConnectionError("Failed to initialize connection pool", e) from e
        self._pool = ConnectionPool(pool_config)
        self._context = TransactionContext()

    @classmethod
    def from_env(cls, overrides: Optional[Mapping[str, Any]] = None) -> "Database":
        """
        Create a Database from environment configuration.

        Args:
            overrides: Optional mapping of env var names to values that take
                precedence over the environment

        Raises:
            ConfigError: If the environment configuration is invalid
            DatabaseConnectionError: If the pool cannot be initialized
        """
        env = Env.load(overrides)
        logger.debug(f"Creating database from environment: {env.mask()}")
        return cls(env.to_database_config())

    @property
    def config(self) -> DatabaseConfig:
        return self._config

    @property
    def pool(self) -> ConnectionPool:
        return self._pool

    @property
    def placeholder(self) -> str:
        """Positional parameter marker expected by this database's driver."""
        return self._config.type.placeholder

    def in_transaction(self) -> bool:
        """Whether the calling thread is inside a ``transaction`` call."""
        return self._context.is_active()

    def query(self) -> QueryBuilder:
        return QueryBuilder(self)

    def execute(self, sql: str, *params: Any) -> QueryResult:
        """
        Execute one SQL statement with positional parameters.

        Inside a transaction the statement runs on the transaction's
        connection. Otherwise a connection is acquired for this call only and
        released whatever the outcome.

        Args:
            sql: SQL statement using the driver's placeholder style
            *params: Values bound positionally, in order

        Returns:
            Fully materialized QueryResult

        Raises:
            QueryError: If no connection can be acquired or the statement fails
        """
        conn = self._context.get()
        release_conn = False

        if conn is None:
            try:
                conn = self._pool.acquire()
            except DatabaseConnectionError as e:
                raise QueryError("Failed to acquire connection", e, sql=sql) from e
            release_conn = True

        try:
            return self._run_statement(conn, sql, params)
        finally:
            if release_conn:
                self._pool.release(conn)

    def _run_statement(self, conn: DriverConnection, sql: str, params: Sequence[Any]) -> QueryResult:
        cursor = None
        try:
            cursor = conn.cursor()
            if params:
                cursor.execute(sql, tuple(params))
            else:
                cursor.execute(sql)

            if cursor.description is not None:
                columns = [column[0] for column in cursor.description]
                return QueryResult.from_rows(columns, cursor.fetchall())
            return QueryResult.from_update_count(cursor.rowcount)

        except conn.driver.module.Error as e:
            error_type = classify_database_error(e)
            logger.error(f"Query failed ({error_type}): {sql} - {str(e)}")
            raise QueryError(
                f"Query execution failed: {sql}", e, sql=sql, error_type=error_type
            ) from e

        finally:
            if cursor is not None:
                try:
                    cursor.close()
                except Exception as e:
                    logger.debug(f"Ignoring error while closing cursor: {str(e)}")

    def transaction(self, operation: Callable[[], T]) -> T:
        """
        Run ``operation`` inside a transaction.

        The outermost call acquires a connection, switches auto-commit off
        and binds the connection to the calling thread. Every ``execute``
        made by ``operation`` then runs on that connection. The transaction
        commits if ``operation`` returns and rolls back if it raises. Nested
        calls just run ``operation`` and propagate its outcome unchanged.

        Exceptions that are not ``Exception`` subclasses (KeyboardInterrupt,
        SystemExit) still roll back, but are re-raised as they are.

        Args:
            operation: Zero-argument callable

        Returns:
            Whatever ``operation`` returns

        Raises:
            DatabaseConnectionError: If no connection can be acquired
            TransactionError: If ``operation`` or the commit fails
        """
        if self._context.is_active():
            return operation()

        conn = self._pool.acquire()
        started = time.monotonic()
        saved_autocommit: Optional[bool] = None
        # True once the transaction ended in a commit or a completed rollback
        settled = False

        try:
            saved_autocommit = conn.get_autocommit()
            conn.set_autocommit(False)
            self._context.bind(conn, saved_autocommit)

            result = operation()

            conn.commit()
            settled = True
            log_transaction_commit(time.monotonic() - started, logger=logger)
            return result

        except BaseException as e:
            rollback_error = None
            try:
                conn.rollback()
                settled = True
            except Exception as rollback_ex:
                rollback_error = rollback_ex

            log_transaction_rollback(
                time.monotonic() - started,
                error_message=str(e) or type(e).__name__,
                rollback_error=str(rollback_error) if rollback_error is not None else None,
                logger=logger,
            )
            if not isinstance(e, Exception):
                raise
            raise TransactionError("Transaction failed", e, rollback_error=rollback_error) from e

        finally:
            # Unbind before release so no stale binding outlives the checkout
            self._context.unbind()
            if not settled:
                # Turning auto-commit back on would commit the open transaction
                # on sqlite and MySQL, so the connection is closed instead and
                # the pool drops it on release.
                try:
                    conn.close()
                except Exception as e:
                    logger.warning(f"Could not close unsettled connection {conn!r}: {str(e)}")
            elif saved_autocommit is not None:
                try:
                    conn.set_autocommit(saved_autocommit)
                except Exception as e:
                    logger.debug(f"Could not restore auto-commit on {conn!r}: {str(e)}")
            self._pool.release(conn)

    def transactional(self, func: Callable[..., T]) -> Callable[..., T]:
        """Decorator form of ``transaction``."""
        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> T:
            return self.transaction(lambda: func(*args, **kwargs))
        return wrapper

    def select(self, table: str) -> QueryResult:
        return self.query().select(table).execute()

    def insert(self, table: str, data: Mapping[str, Any]) -> QueryResult:
        return self.query().insert(table, data).execute()

    def update(self, table: str, data: Mapping[str, Any], where_clause: str, *where_params: Any) -> QueryResult:
        return self.query().update(table, data).where(where_clause).params(*where_params).execute()

    def delete(self, table: str, where_clause: str, *where_params: Any) -> QueryResult:
        return self.query().delete(table).where(where_clause).params(*where_params).execute()

    def close(self) -> None:
        self._pool.close()

    def is_closed(self) -> bool:
        return self._pool.is_closed()

    def __enter__(self) -> "Database":
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()

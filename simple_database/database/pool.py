"""
Database connection pool module.

This module owns the physical connections of one database. Connections are
opened eagerly up to the configured pool size and created on demand beyond
it. A connection found dead when it is handed out is replaced. Everything a
caller returns is rolled back before anyone can reuse it.

All bookkeeping (``available``, ``in_use`` and the closed flag) is guarded
by one lock per pool.
"""

import logging
import threading
from collections import deque
from typing import Any, Deque, Dict, Optional

from ..exceptions import DatabaseConnectionError
from ..models import PoolConfig
from .drivers import Driver, DriverConnection, load_driver

logger = logging.getLogger(__name__)


class ConnectionPool:
    """
    Thread-safe pool of driver connections.

    Example:
        pool = ConnectionPool(create_pool_config(config))
        conn = pool.acquire()
        try:
            cursor = conn.cursor()
            ...
        finally:
            pool.release(conn)
    """

    def __init__(self, config: PoolConfig):
        """
        Open ``config.initial_size`` connections.

        Args:
            config: Resolved pool configuration

        Raises:
            DatabaseConnectionError: If the driver cannot be loaded or any
                initial connection fails to open
        """
        self._config = config
        self._lock = threading.Lock()
        self._available: Deque[DriverConnection] = deque()
        self._in_use: Dict[int, DriverConnection] = {}
        self._closed = False

        try:
            self._driver: Driver = load_driver(config.driver)
            for _ in range(config.initial_size):
                self._available.append(self._create_connection())
        except Exception as e:
            # Nothing half-built stays open
            for conn in self._available:
                _close_quietly(conn)
            self._available.clear()
            logger.error(f"Failed to initialize connection pool: {str(e)}")
            raise DatabaseConnectionError("Failed to initialize connection pool", e) from e

        logger.info(
            f"Connection pool ready ({config.driver.name}, initial_size={config.initial_size})"
        )

    @property
    def config(self) -> PoolConfig:
        return self._config

    @property
    def url(self) -> str:
        return self._config.url

    @property
    def available_count(self) -> int:
        with self._lock:
            return len(self._available)

    @property
    def in_use_count(self) -> int:
        with self._lock:
            return len(self._in_use)

    def is_closed(self) -> bool:
        return self._closed

    def _create_connection(self) -> DriverConnection:
        conn = self._driver.open(self._config.url, self._config.credentials)
        try:
            conn.set_autocommit(self._config.auto_commit)
        except Exception:
            _close_quietly(conn)
            raise
        logger.debug(f"Opened new database connection {conn!r}")
        return conn

    def acquire(self) -> DriverConnection:
        """
        Check a connection out of the pool.

        Returns:
            A live connection owned by the caller until ``release``

        Raises:
            DatabaseConnectionError: If the pool is closed, or a connection
                cannot be created or validated
        """
        with self._lock:
            if self._closed:
                raise DatabaseConnectionError("Connection pool is closed")

            conn = self._available.popleft() if self._available else None

            if conn is not None:
                try:
                    dead = conn.is_closed()
                except Exception as e:
                    _close_quietly(conn)
                    raise DatabaseConnectionError("Failed to validate connection", e) from e
                if dead:
                    logger.info(f"Discarding dead connection {conn!r}, opening a replacement")
                    conn = None

            if conn is None:
                try:
                    conn = self._create_connection()
                except Exception as e:
                    raise DatabaseConnectionError("Failed to create connection", e) from e

            self._in_use[id(conn)] = conn
            return conn

    def release(self, conn: Optional[DriverConnection]) -> None:
        """
        Return a connection to the pool.

        Unknown connections, double releases and releases after ``close``
        are ignored. A live connection is rolled back before it becomes
        available again; a dead one, or one that cannot be rolled back, is
        dropped. This method never raises.
        """
        if conn is None:
            return

        with self._lock:
            if self._in_use.get(id(conn)) is not conn:
                return
            del self._in_use[id(conn)]

            try:
                if conn.is_closed():
                    logger.debug(f"Dropping released connection {conn!r}: already closed")
                    return
                conn.rollback()
            except Exception as e:
                logger.warning(f"Discarding connection {conn!r} after failed reset: {str(e)}")
                _close_quietly(conn)
                return

            self._available.append(conn)

    def close(self) -> None:
        """Close every connection, idle or checked out. Safe to call twice."""
        with self._lock:
            if not self._closed:
                logger.info("Closing connection pool")
            self._closed = True

            for conn in self._available:
                _close_quietly(conn)
            self._available.clear()

            for conn in self._in_use.values():
                _close_quietly(conn)
            self._in_use.clear()

    def __enter__(self) -> "ConnectionPool":
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()


def _close_quietly(conn: DriverConnection) -> None:
    try:
        conn.close()
    except Exception as e:
        logger.debug(f"Ignoring error while closing {conn!r}: {str(e)}")

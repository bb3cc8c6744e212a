"""
Database driver adapters.

This module loads the DB-API 2.0 module behind each supported backend and
wraps its connections in a uniform surface. DB-API leaves auto-commit
control and liveness checks to each driver, so every backend gets a small
DriverConnection subclass that provides them.
"""

import importlib
from abc import ABC, abstractmethod
import logging
from typing import Any, Dict, Mapping, Optional
from urllib.parse import unquote, urlparse

from ..exceptions import DatabaseConnectionError
from ..models import DatabaseType

logger = logging.getLogger(__name__)


class DriverConnection(ABC):
    """
    One physical session to the backend.

    The session may die outside the pool's control (peer shutdown, network
    failure, an explicit close by a caller). ``is_closed`` detects that
    lazily without a round-trip to the server.
    """

    def __init__(self, raw: Any, driver: "Driver"):
        self.raw = raw
        self.driver = driver

    def cursor(self) -> Any:
        return self.raw.cursor()

    def commit(self) -> None:
        self.raw.commit()

    def rollback(self) -> None:
        self.raw.rollback()

    def close(self) -> None:
        self.raw.close()

    @abstractmethod
    def is_closed(self) -> bool:
        ...

    @abstractmethod
    def get_autocommit(self) -> bool:
        ...

    @abstractmethod
    def set_autocommit(self, enabled: bool) -> None:
        ...

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.driver.type.name} at 0x{id(self):x}>"


class SqliteConnection(DriverConnection):
    """sqlite3 connection; auto-commit maps onto ``isolation_level``."""

    def is_closed(self) -> bool:
        try:
            self.raw.total_changes
            return False
        except self.driver.module.ProgrammingError:
            return True

    def get_autocommit(self) -> bool:
        return self.raw.isolation_level is None

    def set_autocommit(self, enabled: bool) -> None:
        # "" restores the driver default of implicit DEFERRED transactions
        self.raw.isolation_level = None if enabled else ""


class PostgresConnection(DriverConnection):
    """psycopg (v3) connection."""

    def is_closed(self) -> bool:
        return bool(self.raw.closed or self.raw.broken)

    def get_autocommit(self) -> bool:
        return bool(self.raw.autocommit)

    def set_autocommit(self, enabled: bool) -> None:
        self.raw.autocommit = enabled


class MysqlConnection(DriverConnection):
    """PyMySQL connection."""

    def is_closed(self) -> bool:
        return not self.raw.open

    def get_autocommit(self) -> bool:
        return bool(self.raw.get_autocommit())

    def set_autocommit(self, enabled: bool) -> None:
        self.raw.autocommit(enabled)


class Driver(ABC):
    """
    A loaded DB-API module for one backend.

    Use ``load_driver`` to construct instances; ``open`` creates a new
    physical connection for every call.
    """

    connection_class = DriverConnection

    def __init__(self, db_type: DatabaseType, module: Any):
        self.type = db_type
        self.module = module

    def open(self, url: str, credentials: Mapping[str, Any]) -> DriverConnection:
        """
        Open a new physical connection.

        Args:
            url: Connection URL built for this backend
            credentials: user/password, connect_timeout (seconds) and extra
                driver properties

        Returns:
            Wrapped driver connection

        Raises:
            Exception: Whatever the driver raises when the backend is unreachable
        """
        raw = self._connect(url, dict(credentials))
        return self.connection_class(raw, self)

    @abstractmethod
    def _connect(self, url: str, credentials: Dict[str, Any]) -> Any:
        """Open the raw DB-API connection."""


class SqliteDriver(Driver):
    connection_class = SqliteConnection

    def _connect(self, url: str, credentials: Dict[str, Any]) -> Any:
        path = url[len(self.type.url_prefix):] if url.startswith(self.type.url_prefix) else url
        credentials.pop("user", None)
        credentials.pop("password", None)
        timeout = credentials.pop("connect_timeout", None)
        if timeout is not None:
            credentials.setdefault("timeout", float(timeout))
        # Pooled connections move between threads
        credentials["check_same_thread"] = False
        return self.module.connect(path, **credentials)


class PostgresDriver(Driver):
    connection_class = PostgresConnection

    def _connect(self, url: str, credentials: Dict[str, Any]) -> Any:
        credentials = {key: value for key, value in credentials.items() if value is not None}
        return self.module.connect(url, **credentials)


class MysqlDriver(Driver):
    connection_class = MysqlConnection

    def _connect(self, url: str, credentials: Dict[str, Any]) -> Any:
        parsed = urlparse(url)
        kwargs: Dict[str, Any] = {
            "host": parsed.hostname,
            "database": unquote(parsed.path.lstrip("/")),
        }
        if parsed.port:
            kwargs["port"] = parsed.port
        kwargs.update({key: value for key, value in credentials.items() if value is not None})
        return self.module.connect(**kwargs)


_DRIVER_CLASSES = {
    DatabaseType.SQLITE: SqliteDriver,
    DatabaseType.MYSQL: MysqlDriver,
    DatabaseType.POSTGRESQL: PostgresDriver,
}


def load_driver(db_type: Optional[DatabaseType]) -> Driver:
    """
    Import the DB-API module for a backend.

    Args:
        db_type: Backend to load

    Returns:
        Driver bound to the imported module

    Raises:
        DatabaseConnectionError: If the type is missing or its module cannot be imported
    """
    if db_type is None:
        raise DatabaseConnectionError("Database type must be specified to load a driver")

    try:
        module = importlib.import_module(db_type.driver_module)
    except ImportError as e:
        logger.error(
            f"Driver module '{db_type.driver_module}' not available. "
            f"Install it to use {db_type.name} databases"
        )
        raise DatabaseConnectionError(
            f"Failed to load driver '{db_type.driver_module}'", e
        ) from e

    logger.debug(f"Loaded driver module '{db_type.driver_module}' for {db_type.name}")
    return _DRIVER_CLASSES[db_type](db_type, module)

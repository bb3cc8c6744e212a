#!/usr/bin/env python3
"""
Database Models

This module contains the configuration structures consumed by the
connection pool and the database façade.
"""

from enum import Enum
from typing import Any, Mapping, NamedTuple, Optional

from ..constants import (
    DEFAULT_POOL_SIZE,
    DEFAULT_CONNECTION_TIMEOUT,
    DEFAULT_AUTO_COMMIT,
    DEFAULT_MYSQL_PORT,
    DEFAULT_POSTGRESQL_PORT,
)


class DatabaseType(Enum):
    """
    Supported backends.

    Each member carries the DB-API module that drives it, the URL prefix
    used when building connection URLs, the default port (0 for file-based
    backends) and the positional placeholder the driver expects.
    """

    SQLITE = ("sqlite3", "sqlite:///", 0, "?")
    MYSQL = ("pymysql", "mysql://", DEFAULT_MYSQL_PORT, "%s")
    POSTGRESQL = ("psycopg", "postgresql://", DEFAULT_POSTGRESQL_PORT, "%s")

    def __init__(self, driver_module: str, url_prefix: str, default_port: int, placeholder: str):
        self.driver_module = driver_module
        self.url_prefix = url_prefix
        self.default_port = default_port
        self.placeholder = placeholder

    @classmethod
    def from_name(cls, name: str) -> "DatabaseType":
        """
        Resolve a type from a case-insensitive name or URL scheme.

        Raises:
            ValueError: If the name does not match any backend
        """
        key = (name or "").strip().lower()
        aliases = {
            "sqlite": cls.SQLITE,
            "sqlite3": cls.SQLITE,
            "mysql": cls.MYSQL,
            "postgresql": cls.POSTGRESQL,
            "postgres": cls.POSTGRESQL,
        }
        if key not in aliases:
            raise ValueError(f"Unsupported database type: {name!r}")
        return aliases[key]


class DatabaseConfig(NamedTuple):
    """
    Database configuration settings.

    Attributes:
        type: Backend type
        database: Database name, or file path for SQLite
        host: Server hostname (ignored for SQLite)
        port: Server port, 0 selects the backend default
        username: Login user
        password: Login password
        pool_size: Number of connections opened eagerly
        connection_timeout: Connect timeout in milliseconds
        auto_commit: Auto-commit flag applied to every new connection
        properties: Extra driver connection properties
    """

    type: Optional[DatabaseType]
    database: Optional[str]
    host: Optional[str] = None
    port: int = 0
    username: Optional[str] = None
    password: Optional[str] = None
    pool_size: int = DEFAULT_POOL_SIZE
    connection_timeout: int = DEFAULT_CONNECTION_TIMEOUT  # milliseconds
    auto_commit: bool = DEFAULT_AUTO_COMMIT
    properties: Mapping[str, Any] = {}


class PoolConfig(NamedTuple):
    """
    Resolved settings a ConnectionPool is built from.

    Attributes:
        driver: Backend type whose driver opens the connections
        url: Connection URL handed to the driver
        credentials: Username/password plus extra driver properties
        initial_size: Connections opened eagerly (a minimum, not a ceiling)
        auto_commit: Auto-commit flag applied to every new connection
    """

    driver: DatabaseType
    url: str
    credentials: Mapping[str, Any]
    initial_size: int = DEFAULT_POOL_SIZE
    auto_commit: bool = DEFAULT_AUTO_COMMIT

"""
Database configuration management module.

This module handles database configuration creation, URL validation and
construction, and the translation of a DatabaseConfig into the resolved
PoolConfig a connection pool is built from.
"""

import logging
import math
from typing import Any, Dict, Mapping, Optional
from urllib.parse import unquote, urlparse

from ..constants import (
    DEFAULT_AUTO_COMMIT,
    DEFAULT_CONNECTION_TIMEOUT,
    DEFAULT_HOST,
    DEFAULT_POOL_SIZE,
)
from ..exceptions import ConfigurationError
from ..models import DatabaseConfig, DatabaseType, PoolConfig

logger = logging.getLogger(__name__)


def validate_database_url(url: str) -> bool:
    """
    Validate that a database URL has the correct format.

    Accepted forms are ``sqlite:///<path>``, ``mysql://user@host/db`` and
    ``postgresql://user@host/db`` (``postgres://`` is an alias).

    Args:
        url: Database URL to validate

    Returns:
        True if URL format is valid, False otherwise
    """
    if not url:
        return False

    try:
        parsed = urlparse(url)

        # Check for required components
        if not parsed.scheme:
            logger.error("Database URL missing scheme (e.g., postgresql://)")
            return False

        try:
            db_type = DatabaseType.from_name(parsed.scheme)
        except ValueError:
            logger.error(
                f"Database URL scheme '{parsed.scheme}' not supported. "
                "Use 'sqlite:///', 'mysql://' or 'postgresql://'"
            )
            return False

        if db_type is DatabaseType.SQLITE:
            if not url.startswith(DatabaseType.SQLITE.url_prefix) or not url[len(DatabaseType.SQLITE.url_prefix):]:
                logger.error("SQLite URL must have the form sqlite:///<path>")
                return False
            return True

        if not parsed.hostname:
            logger.error("Database URL missing hostname")
            return False

        if not parsed.username:
            logger.error("Database URL missing username")
            return False

        if not parsed.path or parsed.path == "/":
            logger.error("Database URL missing database name")
            return False

        # Accessing .port raises ValueError for non-numeric ports
        parsed.port

        return True

    except Exception as e:
        logger.error(f"Invalid database URL format: {str(e)}")
        return False


def parse_database_url(url: str) -> Optional[DatabaseConfig]:
    """
    Split a database URL into a DatabaseConfig.

    Args:
        url: Database URL (see ``validate_database_url``)

    Returns:
        DatabaseConfig with default pool settings, or None if the URL is invalid
    """
    if not validate_database_url(url):
        return None

    parsed = urlparse(url)
    db_type = DatabaseType.from_name(parsed.scheme)

    if db_type is DatabaseType.SQLITE:
        return DatabaseConfig(type=db_type, database=url[len(db_type.url_prefix):])

    return DatabaseConfig(
        type=db_type,
        database=unquote(parsed.path.lstrip("/")),
        host=parsed.hostname,
        port=parsed.port or 0,
        username=unquote(parsed.username) if parsed.username else None,
        password=unquote(parsed.password) if parsed.password else None,
    )


def create_database_config(
    db_type: Optional[DatabaseType],
    database: Optional[str],
    host: Optional[str] = None,
    port: Optional[int] = None,
    username: Optional[str] = None,
    password: Optional[str] = None,
    pool_size: Optional[int] = None,
    connection_timeout: Optional[int] = None,
    auto_commit: Optional[bool] = None,
    properties: Optional[Mapping[str, Any]] = None,
) -> Optional[DatabaseConfig]:
    """
    Create a database configuration with validation.

    Args:
        db_type: Backend type
        database: Database name, or file path for SQLite
        host: Server hostname
        port: Server port (default: backend default)
        username: Login user
        password: Login password
        pool_size: Connections opened eagerly (default: DEFAULT_POOL_SIZE)
        connection_timeout: Connect timeout in ms (default: DEFAULT_CONNECTION_TIMEOUT)
        auto_commit: Auto-commit flag for new connections (default: DEFAULT_AUTO_COMMIT)
        properties: Extra driver connection properties

    Returns:
        DatabaseConfig object or None if validation fails
    """
    if db_type is None:
        logger.error("Database type must be specified")
        return None

    if not database or not database.strip():
        logger.error("Database name/path must be specified")
        return None

    # Use defaults if not specified
    final_port = port if port is not None else 0
    final_pool_size = pool_size if pool_size is not None else DEFAULT_POOL_SIZE
    final_connection_timeout = (
        connection_timeout
        if connection_timeout is not None
        else DEFAULT_CONNECTION_TIMEOUT
    )
    final_auto_commit = auto_commit if auto_commit is not None else DEFAULT_AUTO_COMMIT

    # Validate configuration values
    if final_port < 0 or final_port > 65535:
        logger.error(f"Port must be between 0 and 65535, got {final_port}")
        return None

    if final_pool_size < 0:
        logger.error(f"Pool size must be non-negative, got {final_pool_size}")
        return None

    if final_connection_timeout < 1:
        logger.error(
            f"Connection timeout must be at least 1 millisecond, got {final_connection_timeout}"
        )
        return None

    return DatabaseConfig(
        type=db_type,
        database=database,
        host=host,
        port=final_port,
        username=username,
        password=password,
        pool_size=final_pool_size,
        connection_timeout=final_connection_timeout,
        auto_commit=final_auto_commit,
        properties=dict(properties or {}),
    )


def build_connection_url(config: DatabaseConfig) -> str:
    """
    Build the driver connection URL for a configuration.

    Credentials are never embedded in the URL; they travel separately in
    the pool's credential mapping.

    Args:
        config: Database configuration

    Returns:
        Connection URL

    Raises:
        ConfigurationError: If the type or database name is missing
    """
    if config.type is None:
        raise ConfigurationError("Database type must be specified")

    if not config.database or not config.database.strip():
        raise ConfigurationError("Database name/path must be specified")

    if config.type is DatabaseType.SQLITE:
        return config.type.url_prefix + config.database

    host = config.host or DEFAULT_HOST
    port = config.port or config.type.default_port
    return f"{config.type.url_prefix}{host}:{port}/{config.database}"


def create_pool_config(config: DatabaseConfig) -> PoolConfig:
    """
    Resolve a DatabaseConfig into the settings a ConnectionPool needs.

    Args:
        config: Database configuration

    Returns:
        Immutable PoolConfig

    Raises:
        ConfigurationError: If the configuration cannot produce a valid URL
            or the pool size is negative
    """
    url = build_connection_url(config)

    if config.pool_size < 0:
        raise ConfigurationError(f"Pool size must be non-negative, got {config.pool_size}")

    credentials: Dict[str, Any] = {}
    if config.username is not None:
        credentials["user"] = config.username
    if config.password is not None:
        credentials["password"] = config.password
    if config.connection_timeout:
        credentials["connect_timeout"] = max(1, math.ceil(config.connection_timeout / 1000))
    credentials.update(config.properties or {})

    return PoolConfig(
        driver=config.type,
        url=url,
        credentials=credentials,
        initial_size=config.pool_size,
        auto_commit=config.auto_commit,
    )

#!/usr/bin/env python3
"""
Simple Database Package

A minimal database access layer for DB-API drivers: a thread-safe
connection pool, per-thread transaction scoping with flattened nested
transactions, and a fluent query builder.
"""

__version__ = "1.0.0"
__author__ = "Simple Database"
__description__ = (
    "Connection pooling, transaction scoping and a fluent query builder for DB-API drivers"
)
__license__ = "MIT"

# Import models for public API
from .models import (
    DatabaseType,
    DatabaseConfig,
    PoolConfig,
    QueryResult,
)

# Import exceptions for public API
from .exceptions import (
    DatabaseError,
    ConfigurationError,
    DatabaseConnectionError,
    QueryError,
    TransactionError,
)

# Import constants for public API
from .constants import (
    DEFAULT_POOL_SIZE,
    DEFAULT_CONNECTION_TIMEOUT,
    DEFAULT_AUTO_COMMIT,
)

# Import database functionality for public API
from .database import (
    Database,
    ConnectionPool,
    TransactionContext,
    QueryBuilder,
    create_database_config,
    create_pool_config,
    parse_database_url,
    validate_database_url,
)

# Import configuration for public API
from .config import Env, ConfigError

# Import utilities for public API
from .utils import setup_logging

# Public API exports
__all__ = [
    # Package metadata
    "__version__",
    "__author__",
    "__description__",
    # Data models
    "DatabaseType",
    "DatabaseConfig",
    "PoolConfig",
    "QueryResult",
    # Exceptions
    "DatabaseError",
    "ConfigurationError",
    "DatabaseConnectionError",
    "QueryError",
    "TransactionError",
    "ConfigError",
    # Constants
    "DEFAULT_POOL_SIZE",
    "DEFAULT_CONNECTION_TIMEOUT",
    "DEFAULT_AUTO_COMMIT",
    # Database functionality
    "Database",
    "ConnectionPool",
    "TransactionContext",
    "QueryBuilder",
    "create_database_config",
    "create_pool_config",
    "parse_database_url",
    "validate_database_url",
    # Configuration
    "Env",
    # Utilities
    "setup_logging",
]

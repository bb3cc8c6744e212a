#!/usr/bin/env python3
"""
Database package for the simple database library.

This package provides configuration resolution, driver adapters, the
connection pool, per-thread transaction binding, the fluent query builder
and the Database façade that ties them together.
"""

from .config import (
    validate_database_url,
    parse_database_url,
    create_database_config,
    build_connection_url,
    create_pool_config,
)

from .drivers import (
    Driver,
    DriverConnection,
    load_driver,
)

from .pool import ConnectionPool

from .transaction import TransactionContext

from .builder import QueryBuilder

from .utils import classify_database_error

from .core import Database

__all__ = [
    # Configuration
    "validate_database_url",
    "parse_database_url",
    "create_database_config",
    "build_connection_url",
    "create_pool_config",
    # Drivers
    "Driver",
    "DriverConnection",
    "load_driver",
    # Connection management
    "ConnectionPool",
    "TransactionContext",
    # Statements
    "QueryBuilder",
    "Database",
    # Utilities
    "classify_database_error",
]

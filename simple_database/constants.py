#!/usr/bin/env python3
"""
Library Constants

This module contains the configuration defaults shared by the connection
pool, the configuration layer and the query builder.
"""

# Connection pool constants
DEFAULT_POOL_SIZE = 5  # Connections opened eagerly at pool construction
DEFAULT_CONNECTION_TIMEOUT = 30000  # milliseconds
DEFAULT_AUTO_COMMIT = True

# Default ports per backend
DEFAULT_MYSQL_PORT = 3306
DEFAULT_POSTGRESQL_PORT = 5432
DEFAULT_HOST = "localhost"

# Error classifications attached to QueryError
ERROR_PERMANENT = "permanent"
ERROR_TRANSIENT = "transient"
ERROR_SYSTEMIC = "systemic"

#!/usr/bin/env python3
"""
Data Models Module

This module contains the data structures and type definitions used
throughout the simple database library.
"""

from .database import DatabaseType, DatabaseConfig, PoolConfig
from .result import QueryResult

__all__ = [
    "DatabaseType",
    "DatabaseConfig",
    "PoolConfig",
    "QueryResult",
]

"""
Logging utilities for the simple database library.

This module provides centralized logging configuration and the structured
transaction records emitted by the database façade.
"""

import json
import logging
import threading
import time
from typing import Optional


def setup_logging(verbose: bool = False):
    """Setup logging configuration with appropriate level and format."""
    level = logging.DEBUG if verbose else logging.INFO
    format_string = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"

    logging.basicConfig(level=level, format=format_string, datefmt="%Y-%m-%d %H:%M:%S")

    # Set specific logger levels
    logging.getLogger("psycopg").setLevel(logging.WARNING)  # Reduce driver noise
    logging.getLogger("pymysql").setLevel(logging.WARNING)


def log_transaction_commit(
    duration: float,
    timestamp: Optional[float] = None,
    logger: Optional[logging.Logger] = None
):
    """
    Log a structured record for a committed transaction.

    The record is a single JSON document prefixed with ``TRANSACTION_COMMIT:``
    so it can be picked out of mixed log streams by automated tools.

    Args:
        duration: Time from transaction start to commit (seconds)
        timestamp: Commit timestamp (defaults to current time)
        logger: Logger instance to use (defaults to current module logger)
    """
    if logger is None:
        logger = logging.getLogger(__name__)

    if timestamp is None:
        timestamp = time.time()

    commit_record = {
        "event_type": "transaction_commit",
        "timestamp": timestamp,
        "thread": threading.current_thread().name,
        "duration_seconds": round(duration, 3),
        "success": True
    }

    logger.debug(f"TRANSACTION_COMMIT: {json.dumps(commit_record, ensure_ascii=False)}")


def log_transaction_rollback(
    duration: float,
    error_message: str,
    rollback_error: Optional[str] = None,
    timestamp: Optional[float] = None,
    logger: Optional[logging.Logger] = None
):
    """
    Log a structured record for a rolled back transaction.

    Args:
        duration: Time from transaction start to rollback (seconds)
        error_message: Description of the failure that triggered the rollback
        rollback_error: Description of a failed rollback, if any
        timestamp: Rollback timestamp (defaults to current time)
        logger: Logger instance to use (defaults to current module logger)
    """
    if logger is None:
        logger = logging.getLogger(__name__)

    if timestamp is None:
        timestamp = time.time()

    rollback_record = {
        "event_type": "transaction_rollback",
        "timestamp": timestamp,
        "thread": threading.current_thread().name,
        "duration_seconds": round(duration, 3),
        "error_message": error_message,
        "rollback_error": rollback_error,
        "success": False
    }

    # A failed rollback leaves the connection state unknown
    if rollback_error is not None:
        logger.error(f"TRANSACTION_ROLLBACK: {json.dumps(rollback_record, ensure_ascii=False)}")
    else:
        logger.warning(f"TRANSACTION_ROLLBACK: {json.dumps(rollback_record, ensure_ascii=False)}")

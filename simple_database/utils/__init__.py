"""
Utilities module for the simple database library.

This module provides shared logging utilities: logging setup and the
structured transaction records written by the database façade.
"""

from .logging import setup_logging, log_transaction_commit, log_transaction_rollback

__all__ = [
    "setup_logging",
    "log_transaction_commit",
    "log_transaction_rollback",
]

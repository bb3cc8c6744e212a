"""
Database utilities module.

This module provides helpers for classifying driver errors so callers can
decide which failures are worth retrying.
"""

from ..constants import ERROR_PERMANENT, ERROR_SYSTEMIC, ERROR_TRANSIENT


def classify_database_error(exception: BaseException) -> str:
    """
    Classify database errors into permanent, transient, or systemic categories.

    Args:
        exception: Database exception to classify

    Returns:
        Error type: "permanent", "transient", or "systemic"
    """
    error_str = str(exception).lower()

    # Permanent errors - retrying the same statement cannot succeed
    permanent_indicators = [
        "syntax error",
        "constraint violation",
        "foreign key constraint",
        "check constraint",
        "not null",
        "unique constraint",
        "duplicate key",
        "duplicate entry",
        "no such table",
        "no such column",
        "relation \"",  # relation "x" does not exist
        "column \"",
        "doesn't exist",
    ]

    for indicator in permanent_indicators:
        if indicator in error_str:
            return ERROR_PERMANENT

    # Systemic errors - the whole backend is unusable with this configuration
    systemic_indicators = [
        "authentication failed",
        "access denied",
        "permission denied",
        "role \"",
        "database \"",
        "unknown database",
        "unable to open database",
        "ssl required",
        "password authentication failed",
    ]

    for indicator in systemic_indicators:
        if indicator in error_str:
            return ERROR_SYSTEMIC

    # Default to transient: timeouts, dropped connections, deadlocks, locked databases
    return ERROR_TRANSIENT

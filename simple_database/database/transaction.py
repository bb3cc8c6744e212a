"""
Per-thread transaction binding.

A TransactionContext records which connection the calling thread's active
transaction runs on. Nested ``execute``/``transaction`` calls on that
thread consult it and reuse the connection instead of acquiring another.
Only the owning thread ever reads or writes its entry, so no lock is needed.
"""

import threading
from typing import Optional

from .drivers import DriverConnection


class TransactionContext:
    """Thread-local binding of ``(connection, saved auto-commit flag)``."""

    def __init__(self):
        self._local = threading.local()

    def get(self) -> Optional[DriverConnection]:
        """Connection bound to the calling thread, or None outside a transaction."""
        return getattr(self._local, "connection", None)

    def saved_autocommit(self) -> Optional[bool]:
        """Auto-commit flag the bound connection had before the transaction began."""
        return getattr(self._local, "saved_autocommit", None)

    def is_active(self) -> bool:
        return self.get() is not None

    def bind(self, connection: DriverConnection, saved_autocommit: bool) -> None:
        """
        Bind a connection to the calling thread.

        Raises:
            RuntimeError: If the thread is already bound
        """
        if self.is_active():
            raise RuntimeError("A transaction is already bound to this thread")
        self._local.connection = connection
        self._local.saved_autocommit = saved_autocommit

    def unbind(self) -> None:
        self._local.connection = None
        self._local.saved_autocommit = None

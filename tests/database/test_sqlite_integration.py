#!/usr/bin/env python3
"""
End-to-end tests against a real SQLite database file.

These tests check commit and rollback visibility through the full stack:
configuration, driver adapter, pool, transaction binding and query builder.
"""

import os
import sqlite3
import tempfile
import threading
import unittest
from unittest.mock import patch

from simple_database import Database, DatabaseType, QueryError, TransactionError
from simple_database.database import create_database_config


class SqliteTestCase(unittest.TestCase):
    """Base class that provides a Database over a fresh SQLite file."""

    pool_size = 2

    def setUp(self):
        self.temp_dir = tempfile.TemporaryDirectory()
        self.db_path = os.path.join(self.temp_dir.name, "test.db")
        config = create_database_config(DatabaseType.SQLITE, self.db_path, pool_size=self.pool_size)
        self.db = Database(config)
        self.db.execute("CREATE TABLE items (id INTEGER PRIMARY KEY, name TEXT, qty INTEGER)")

    def tearDown(self):
        self.db.close()
        self.temp_dir.cleanup()

    def count_items(self) -> int:
        return self.db.execute("SELECT count(*) AS n FROM items").first["n"]

    def count_from_outside(self) -> int:
        """Count rows through an independent connection, bypassing the pool."""
        conn = sqlite3.connect(self.db_path)
        try:
            return conn.execute("SELECT count(*) FROM items").fetchone()[0]
        finally:
            conn.close()


class TestSqliteExecute(SqliteTestCase):
    """Test cases for plain statement execution."""

    def test_ddl_reports_zero_update_count(self):
        """Test that statements without a row count report 0, never negative."""
        result = self.db.execute("CREATE TABLE other (id INTEGER)")
        self.assertTrue(result.is_update)
        self.assertEqual(result.update_count, 0)

    def test_insert_and_select(self):
        """Test that inserted rows come back as ordered mappings."""
        inserted = self.db.execute("INSERT INTO items (name, qty) VALUES (?, ?)", "apple", 3)
        self.assertEqual(inserted.update_count, 1)

        result = self.db.execute("SELECT name, qty FROM items WHERE name = ?", "apple")
        self.assertEqual(result.rows, [{"name": "apple", "qty": 3}])
        self.assertEqual(list(result.first.keys()), ["name", "qty"])

    def test_auto_commit_outside_transaction(self):
        """Test that statements outside a transaction are visible to other connections."""
        self.db.execute("INSERT INTO items (name, qty) VALUES (?, ?)", "pear", 1)
        self.assertEqual(self.count_from_outside(), 1)

    def test_invalid_sql_raises_query_error(self):
        """Test that SQLite errors are wrapped with the SQL text."""
        with self.assertRaises(QueryError) as cm:
            self.db.execute("SELECT * FROM missing_table")

        self.assertEqual(cm.exception.sql, "SELECT * FROM missing_table")
        self.assertIsInstance(cm.exception.__cause__, sqlite3.Error)
        self.assertEqual(cm.exception.error_type, "permanent")
        self.assertEqual(self.db.pool.in_use_count, 0)


class TestSqliteTransactions(SqliteTestCase):
    """Test cases for commit and rollback visibility."""

    def test_commit_makes_writes_visible(self):
        """Test that a successful transaction commits every write."""
        def operation():
            self.db.execute("INSERT INTO items (name, qty) VALUES (?, ?)", "a", 1)
            self.db.execute("INSERT INTO items (name, qty) VALUES (?, ?)", "b", 2)
            return self.count_items()

        self.assertEqual(self.db.transaction(operation), 2)
        self.assertEqual(self.count_from_outside(), 2)

    def test_failure_rolls_back_writes(self):
        """Test that an insert followed by an error leaves no trace."""
        def operation():
            self.db.execute("INSERT INTO items (name, qty) VALUES (?, ?)", "ghost", 1)
            raise RuntimeError("abort")

        with self.assertRaises(TransactionError):
            self.db.transaction(operation)

        self.assertEqual(self.count_items(), 0)
        self.assertEqual(self.count_from_outside(), 0)

    def test_query_error_inside_transaction_rolls_back(self):
        """Test that a failing statement aborts the surrounding transaction."""
        def operation():
            self.db.execute("INSERT INTO items (name, qty) VALUES (?, ?)", "first", 1)
            self.db.execute("INSERT INTO nowhere VALUES (1)")

        with self.assertRaises(TransactionError) as cm:
            self.db.transaction(operation)

        self.assertIsInstance(cm.exception.__cause__, QueryError)
        self.assertEqual(self.count_items(), 0)

    def test_nested_success_rolled_back_by_outer_failure(self):
        """Test that inner transactions share the outer rollback."""
        def inner():
            self.db.execute("INSERT INTO items (name, qty) VALUES (?, ?)", "inner", 1)
            return "inner done"

        def outer():
            self.assertEqual(self.db.transaction(inner), "inner done")
            raise ValueError("outer failed")

        with self.assertRaises(TransactionError):
            self.db.transaction(outer)

        self.assertEqual(self.count_items(), 0)

    def test_nested_transaction_value(self):
        """Test that nested transactions return the innermost value."""
        self.assertEqual(self.db.transaction(lambda: self.db.transaction(lambda: 42)), 42)

    def test_uncommitted_writes_invisible_to_other_connections(self):
        """Test isolation while a transaction is still open."""
        outside_counts = []

        def operation():
            self.db.execute("INSERT INTO items (name, qty) VALUES (?, ?)", "pending", 1)
            outside_counts.append(self.count_from_outside())

        self.db.transaction(operation)

        self.assertEqual(outside_counts, [0])
        self.assertEqual(self.count_from_outside(), 1)

    def test_concurrent_transactions_in_threads(self):
        """Test that transactions in different threads commit independently."""
        errors = []

        def worker(n):
            try:
                def operation():
                    self.db.execute("INSERT INTO items (name, qty) VALUES (?, ?)", f"w{n}", n)
                self.db.transaction(operation)
            except Exception as e:
                errors.append(e)

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        self.assertEqual(errors, [])
        self.assertEqual(self.count_from_outside(), 4)
        self.assertEqual(self.db.pool.in_use_count, 0)


class TestSqlitePoolLifecycle(SqliteTestCase):
    """Test cases for dead connection handling with real connections."""

    pool_size = 1

    def test_externally_closed_connection_is_replaced(self):
        """Test that a connection closed by its user is never handed out again."""
        conn = self.db.pool.acquire()
        conn.close()
        self.assertTrue(conn.is_closed())
        self.db.pool.release(conn)

        replacement = self.db.pool.acquire()
        self.assertIsNot(replacement, conn)
        self.assertFalse(replacement.is_closed())
        self.db.pool.release(replacement)

        self.assertEqual(self.count_items(), 0)

    def test_interrupt_rolls_back_writes(self):
        """Test that KeyboardInterrupt inside a transaction never commits its writes."""
        def operation():
            self.db.execute("INSERT INTO items (name, qty) VALUES (?, ?)", "half", 1)
            raise KeyboardInterrupt()

        with self.assertRaises(KeyboardInterrupt):
            self.db.transaction(operation)

        self.assertEqual(self.count_from_outside(), 0)
        self.assertEqual(self.count_items(), 0)
        self.assertEqual(self.db.pool.in_use_count, 0)

    def test_failed_rollback_does_not_commit_writes(self):
        """Test that a connection whose rollback failed is dropped, not committed."""
        conn = self.db.pool.acquire()
        self.db.pool.release(conn)
        failure = sqlite3.OperationalError("rollback failed")

        def operation():
            self.db.execute("INSERT INTO items (name, qty) VALUES (?, ?)", "ghost", 1)
            raise ValueError("boom")

        with patch.object(conn, "rollback", side_effect=failure):
            with self.assertRaises(TransactionError) as cm:
                self.db.transaction(operation)

        self.assertIs(cm.exception.rollback_error, failure)
        self.assertTrue(conn.is_closed())
        self.assertEqual(self.db.pool.available_count, 0)
        self.assertEqual(self.count_from_outside(), 0)
        self.assertEqual(self.count_items(), 0)

    def test_auto_commit_restored_after_transaction(self):
        """Test that pooled connections return to auto-commit mode."""
        self.db.transaction(lambda: None)

        conn = self.db.pool.acquire()
        try:
            self.assertTrue(conn.get_autocommit())
        finally:
            self.db.pool.release(conn)


class TestSqliteQueryBuilder(SqliteTestCase):
    """Test cases for the fluent builder against SQLite."""

    def test_crud_shortcuts(self):
        """Test insert, update, select and delete shortcuts end to end."""
        self.db.insert("items", {"name": "apple", "qty": 1})
        self.db.insert("items", {"name": "pear", "qty": 5})

        updated = self.db.update("items", {"qty": 10}, "name = ?", "apple")
        self.assertEqual(updated.update_count, 1)

        rows = self.db.select("items")
        self.assertEqual(sorted(rows.column("qty")), [5, 10])

        deleted = self.db.delete("items", "qty > ?", 6)
        self.assertEqual(deleted.update_count, 1)
        self.assertEqual(self.db.select("items").column("name"), ["pear"])

    def test_select_with_clauses(self):
        """Test where, order by and limit chaining."""
        for name, qty in [("c", 3), ("a", 1), ("b", 2), ("d", 4)]:
            self.db.insert("items", {"name": name, "qty": qty})

        result = (
            self.db.query()
            .select("items", "name")
            .where("qty >= ?")
            .param(2)
            .order_by("name")
            .limit(2)
            .execute()
        )

        self.assertEqual(result.column("name"), ["b", "c"])

    def test_execute_in_transaction_commits(self):
        """Test that a builder statement can run in its own transaction."""
        result = self.db.query().insert("items", {"name": "tx", "qty": 7}).execute_in_transaction()

        self.assertEqual(result.update_count, 1)
        self.assertEqual(self.count_from_outside(), 1)

    def test_execute_in_transaction_failure_raises_query_error(self):
        """Test that a failing builder transaction is reported as QueryError."""
        with self.assertRaises(QueryError) as cm:
            self.db.query().insert("missing", {"name": "x"}).execute_in_transaction()

        self.assertIsInstance(cm.exception.__cause__, TransactionError)


if __name__ == "__main__":
    unittest.main()

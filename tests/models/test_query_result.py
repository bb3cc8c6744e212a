#!/usr/bin/env python3
"""
Tests for the QueryResult model.
"""

import unittest

from simple_database.models import QueryResult


class TestRowSetResult(unittest.TestCase):
    """Test cases for row-set results."""

    def setUp(self):
        self.result = QueryResult.from_rows(
            ["id", "name", "email"],
            [(1, "Ada", "ada@example.com"), (2, "Grace", None)],
        )

    def test_row_set_flags(self):
        self.assertFalse(self.result.is_update)
        self.assertEqual(self.result.update_count, -1)
        self.assertEqual(self.result.size, 2)
        self.assertEqual(len(self.result), 2)
        self.assertFalse(self.result.is_empty)

    def test_rows_keep_column_order(self):
        """Test that each row maps columns in select order."""
        first = self.result.first
        self.assertEqual(list(first.keys()), ["id", "name", "email"])
        self.assertEqual(first, {"id": 1, "name": "Ada", "email": "ada@example.com"})

    def test_null_values_preserved(self):
        self.assertIn("email", self.result.rows[1])
        self.assertIsNone(self.result.rows[1]["email"])

    def test_accessors_return_copies(self):
        """Test that mutating returned rows never changes the result."""
        rows = self.result.rows
        rows[0]["name"] = "changed"
        rows.append({"id": 99})

        first = self.result.first
        first["name"] = "also changed"

        for row in self.result:
            row["id"] = -1

        self.assertEqual(self.result.size, 2)
        self.assertEqual(self.result.first["name"], "Ada")
        self.assertEqual(self.result.column("id"), [1, 2])

    def test_map(self):
        names = self.result.map(lambda row: row["name"].upper())
        self.assertEqual(names, ["ADA", "GRACE"])

    def test_map_cannot_mutate(self):
        def mutate(row):
            row["name"] = None
            return row

        self.result.map(mutate)
        self.assertEqual(self.result.column("name"), ["Ada", "Grace"])

    def test_column_missing_name(self):
        self.assertEqual(self.result.column("missing"), [None, None])

    def test_repr(self):
        self.assertEqual(repr(self.result), "QueryResult(rows=2)")


class TestEmptyAndUpdateResults(unittest.TestCase):
    """Test cases for empty row-sets and update counts."""

    def test_empty_row_set(self):
        result = QueryResult.from_rows(["id"], [])

        self.assertFalse(result.is_update)
        self.assertTrue(result.is_empty)
        self.assertIsNone(result.first)
        self.assertEqual(result.rows, [])
        self.assertEqual(result.map(lambda row: row), [])

    def test_update_result(self):
        result = QueryResult.from_update_count(3)

        self.assertTrue(result.is_update)
        self.assertEqual(result.update_count, 3)
        self.assertTrue(result.is_empty)
        self.assertIsNone(result.first)
        self.assertEqual(repr(result), "QueryResult(update_count=3)")

    def test_negative_update_count_clamped(self):
        """Test that drivers reporting -1 produce a count of 0."""
        self.assertEqual(QueryResult.from_update_count(-1).update_count, 0)

    def test_result_is_slotted(self):
        result = QueryResult.from_update_count(1)
        with self.assertRaises(AttributeError):
            result.extra = True


if __name__ == "__main__":
    unittest.main()

"""
Fluent SQL builder module.

QueryBuilder concatenates SQL text and collects positional parameters, then
hands both to its Database. Identifiers (table and column names) are
inserted verbatim and must come from trusted code; values always travel as
bound parameters.
"""

from typing import TYPE_CHECKING, Any, List, Mapping, Optional, Tuple

from ..exceptions import QueryError, TransactionError
from ..models import QueryResult

if TYPE_CHECKING:
    from .core import Database


class QueryBuilder:
    """
    Fluent API for building and executing SQL statements.

    Example:
        adults = (
            db.query()
            .select("users", "id", "name")
            .where("age >= ?")
            .param(18)
            .order_by("name")
            .limit(10)
            .execute()
        )
    """

    def __init__(self, database: "Database"):
        self._database = database
        self._sql: Optional[str] = None
        self._parameters: List[Any] = []

    @property
    def placeholder(self) -> str:
        return self._database.placeholder

    def sql(self, sql: str) -> "QueryBuilder":
        """Use raw SQL text as the statement."""
        self._sql = sql
        return self

    def param(self, value: Any) -> "QueryBuilder":
        self._parameters.append(value)
        return self

    def params(self, *values: Any) -> "QueryBuilder":
        self._parameters.extend(values)
        return self

    def select(self, table: str, *columns: str) -> "QueryBuilder":
        """SELECT the given columns (all columns when none are given) from ``table``."""
        selected = ", ".join(columns) if columns else "*"
        self._sql = f"SELECT {selected} FROM {table}"
        return self

    def where(self, condition: str) -> "QueryBuilder":
        self._require_sql("WHERE")
        self._sql += f" WHERE {condition}"
        return self

    def order_by(self, *columns: str) -> "QueryBuilder":
        self._require_sql("ORDER BY")
        self._sql += f" ORDER BY {', '.join(columns)}"
        return self

    def limit(self, limit: int) -> "QueryBuilder":
        self._require_sql("LIMIT")
        self._sql += f" LIMIT {int(limit)}"
        return self

    def insert(self, table: str, data: Mapping[str, Any]) -> "QueryBuilder":
        """INSERT one row; column order follows ``data``'s iteration order."""
        columns = ", ".join(data.keys())
        placeholders = ", ".join([self.placeholder] * len(data))
        self._sql = f"INSERT INTO {table} ({columns}) VALUES ({placeholders})"
        self._parameters.extend(data.values())
        return self

    def update(self, table: str, data: Mapping[str, Any]) -> "QueryBuilder":
        sets = ", ".join(f"{column} = {self.placeholder}" for column in data.keys())
        self._sql = f"UPDATE {table} SET {sets}"
        self._parameters.extend(data.values())
        return self

    def delete(self, table: str) -> "QueryBuilder":
        self._sql = f"DELETE FROM {table}"
        return self

    def build(self) -> Tuple[str, Tuple[Any, ...]]:
        """
        Return the statement and its parameters without executing.

        Raises:
            QueryError: If no SQL has been set
        """
        if self._sql is None or not self._sql.strip():
            raise QueryError("SQL query is empty")
        return self._sql, tuple(self._parameters)

    def execute(self) -> QueryResult:
        """
        Execute the statement.

        Raises:
            QueryError: If no SQL has been set or execution fails
        """
        sql, parameters = self.build()
        return self._database.execute(sql, *parameters)

    def execute_in_transaction(self) -> QueryResult:
        """
        Execute the statement inside its own transaction.

        Joins the caller's transaction when one is already active.

        Raises:
            QueryError: If the statement or the transaction fails
        """
        try:
            return self._database.transaction(self.execute)
        except TransactionError as e:
            raise QueryError("Transaction failed", e, sql=self._sql) from e

    def _require_sql(self, clause: str) -> None:
        if self._sql is None:
            raise QueryError(f"Cannot add {clause} clause before a statement is set")

    def __repr__(self) -> str:
        return f"QueryBuilder(sql={self._sql!r}, params={self._parameters!r})"

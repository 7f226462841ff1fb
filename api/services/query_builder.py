"""
SQL query builder for the marketplace tables.

Column names are checked against the known table columns so that values
coming from filters can only ever reach SQL as bound parameters.
"""

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Optional, List, Tuple, Any, Sequence

from src.database.schema import TABLE_COLUMNS


@dataclass
class QueryCondition:
    """Represents a WHERE condition."""
    column: str
    operator: str
    value: Any
    table_alias: Optional[str] = None
    is_list: bool = False

    def to_sql(self) -> Tuple[str, List[Any]]:
        """Convert to SQL condition with parameter placeholders."""
        col = self.column
        if self.table_alias:
            col = f"{self.table_alias}.{col}"

        if self.is_list and isinstance(self.value, (list, tuple)):
            placeholders = ", ".join(["?" for _ in self.value])
            return f"{col} {self.operator} ({placeholders})", list(self.value)

        return f"{col} {self.operator} ?", [self.value]


class QueryBuilder:
    """
    Fluent SQL builder producing a query string and its parameters.

    Usage:
        query, params = (
            QueryBuilder()
            .select("listings", ["id", "name", "status"])
            .where_in("status", ["pending", "published"])
            .where_search(["name", "description"], "cafe")
            .where_date_range("created_at", date_from, date_to)
            .order_by("created_at", desc=True)
            .limit(11)
            .build()
        )
    """

    def __init__(self):
        self._reset()

    def _reset(self):
        """Reset builder state for new query."""
        self._table: Optional[str] = None
        self._columns: List[str] = []
        self._conditions: List[QueryCondition] = []
        self._condition_strings: List[str] = []
        self._params: List[Any] = []
        self._group_by: List[str] = []
        self._order_by: List[str] = []
        self._limit_val: Optional[int] = None

    def _check_column(self, column: str) -> str:
        known = TABLE_COLUMNS.get(self._table)
        if known is not None and column not in known:
            raise ValueError(f"Unknown column '{column}' for table '{self._table}'")
        return column

    def select(self, table: str, columns: Optional[List[str]] = None) -> "QueryBuilder":
        """
        Start a SELECT query on a table.

        Args:
            table: Table name
            columns: Column names to select (all columns when omitted)

        Returns:
            Self for chaining
        """
        if table not in TABLE_COLUMNS:
            raise ValueError(f"Unknown table '{table}'")
        self._reset()
        self._table = table
        self._columns = [self._check_column(c) for c in (columns or [])]
        return self

    def add_expression(self, expression: str, alias: str) -> "QueryBuilder":
        """Add a computed column (e.g. an aggregate)."""
        self._columns.append(f"{expression} AS {alias}")
        return self

    # -------------------------------------------------------------------------
    # WHERE Conditions
    # -------------------------------------------------------------------------

    def where(self, sql: str, params: Optional[List[Any]] = None) -> "QueryBuilder":
        """Add raw WHERE condition."""
        self._condition_strings.append(sql)
        if params:
            self._params.extend(params)
        return self

    def where_equal(self, column: str, value: Any) -> "QueryBuilder":
        """Add WHERE column = value condition."""
        self._conditions.append(QueryCondition(self._check_column(column), "=", value))
        return self

    def where_in(self, column: str, values: Sequence[Any]) -> "QueryBuilder":
        """Add WHERE column IN (...) condition; no-op for an empty list."""
        if not values:
            return self
        self._conditions.append(QueryCondition(
            column=self._check_column(column),
            operator="IN",
            value=sorted(values),
            is_list=True,
        ))
        return self

    def where_any_in(self, column: str, values: Sequence[Any]) -> "QueryBuilder":
        """Add a condition matching list columns sharing any element with ``values``."""
        if not values:
            return self
        col = self._check_column(column)
        placeholders = ", ".join("?" for _ in values)
        self._condition_strings.append(f"list_has_any({col}, [{placeholders}])")
        self._params.extend(sorted(values))
        return self

    def where_bool(self, column: str, value: Optional[bool]) -> "QueryBuilder":
        """Constrain a boolean column; None imposes no constraint, NULL counts as false."""
        if value is None:
            return self
        col = self._check_column(column)
        self._condition_strings.append(f"COALESCE({col}, FALSE) = ?")
        self._params.append(value)
        return self

    def where_search(self, columns: List[str], text: Optional[str]) -> "QueryBuilder":
        """Case-insensitive substring match against any of ``columns``."""
        if not text:
            return self
        escaped = text.lower().replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
        pattern = f"%{escaped}%"
        clauses = [
            f"LOWER(COALESCE({self._check_column(c)}, '')) LIKE ? ESCAPE '\\'" for c in columns
        ]
        self._condition_strings.append(f"({' OR '.join(clauses)})")
        self._params.extend([pattern] * len(clauses))
        return self

    def where_range(self, column: str,
                    lower: Optional[float] = None,
                    upper: Optional[float] = None) -> "QueryBuilder":
        """Add inclusive numeric bounds."""
        col = self._check_column(column)
        if lower is not None:
            self._condition_strings.append(f"{col} >= ?")
            self._params.append(lower)
        if upper is not None:
            self._condition_strings.append(f"{col} <= ?")
            self._params.append(upper)
        return self

    def where_date_range(self, column: str,
                         date_from: Optional[date] = None,
                         date_to: Optional[date] = None) -> "QueryBuilder":
        """Add WHERE timestamp column within dates, both days inclusive."""
        col = self._check_column(column)

        if date_from:
            self._condition_strings.append(f"{col} >= ?")
            self._params.append(datetime.combine(date_from, time.min))

        if date_to:
            self._condition_strings.append(f"{col} < ?")
            self._params.append(datetime.combine(date_to + timedelta(days=1), time.min))

        return self

    def where_before_key(self, sort_column: str, sort_value: Any,
                         id_value: str, id_column: str = "id") -> "QueryBuilder":
        """Keyset condition for descending (sort_column, id) order."""
        sort_col = self._check_column(sort_column)
        id_col = self._check_column(id_column)
        self._condition_strings.append(
            f"({sort_col} < ? OR ({sort_col} = ? AND {id_col} < ?))"
        )
        self._params.extend([sort_value, sort_value, id_value])
        return self

    # -------------------------------------------------------------------------
    # GROUP BY, ORDER BY, LIMIT
    # -------------------------------------------------------------------------

    def group_by(self, *columns: str) -> "QueryBuilder":
        """Add GROUP BY clause."""
        self._group_by.extend(self._check_column(c) for c in columns)
        return self

    def order_by(self, column: str, desc: bool = False) -> "QueryBuilder":
        """Add ORDER BY clause."""
        direction = "DESC" if desc else "ASC"
        self._order_by.append(f"{self._check_column(column)} {direction}")
        return self

    def limit(self, limit: int) -> "QueryBuilder":
        """Add LIMIT clause."""
        self._limit_val = int(limit)
        return self

    # -------------------------------------------------------------------------
    # Build Methods
    # -------------------------------------------------------------------------

    def _where_clause(self) -> Tuple[Optional[str], List[Any]]:
        all_conditions = []
        all_params = []

        for cond in self._conditions:
            sql, params = cond.to_sql()
            all_conditions.append(sql)
            all_params.extend(params)

        all_conditions.extend(self._condition_strings)
        all_params.extend(self._params)

        if not all_conditions:
            return None, all_params
        return f"WHERE {' AND '.join(all_conditions)}", all_params

    def build(self) -> Tuple[str, List[Any]]:
        """
        Build the final SQL query and parameters.

        Returns:
            Tuple of (sql_query, parameters)
        """
        if not self._table:
            raise ValueError("No table specified. Call select() first.")

        select_cols = ", ".join(self._columns) if self._columns else "*"
        parts = [f"SELECT {select_cols}", f"FROM {self._table}"]

        where, params = self._where_clause()
        if where:
            parts.append(where)
        if self._group_by:
            parts.append(f"GROUP BY {', '.join(self._group_by)}")
        if self._order_by:
            parts.append(f"ORDER BY {', '.join(self._order_by)}")
        if self._limit_val is not None:
            parts.append(f"LIMIT {self._limit_val}")

        return "\n".join(parts), params

    def build_count(self) -> Tuple[str, List[Any]]:
        """
        Build a COUNT(*) query using the same conditions.

        Returns:
            Tuple of (count_query, parameters)
        """
        if not self._table:
            raise ValueError("No table specified. Call select() first.")

        parts = ["SELECT COUNT(*) AS count", f"FROM {self._table}"]
        where, params = self._where_clause()
        if where:
            parts.append(where)
        return "\n".join(parts), params

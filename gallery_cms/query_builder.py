"""
Immutable query builder for the gallery tables.

Conditions are kept in structured form so the same builder can be compiled
to parameterized PostgreSQL statements or evaluated against plain rows.
"""

import re
from dataclasses import dataclass
from typing import Any

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")
_OPERATORS = ("=", "!=", "<>", "<", "<=", ">", ">=", "IN", "NOT IN")


def _check_identifier(name: str) -> str:
    if not _IDENTIFIER.match(name):
        raise ValueError(f"Invalid identifier: {name!r}")
    return name


def _set_item(column: str, index: int, advancing: bool) -> str:
    if advancing:
        return f"{column} = GREATEST(${index}, {column} + interval '1 microsecond')"
    return f"{column} = ${index}"


@dataclass(frozen=True)
class Condition:
    field: str
    operator: str
    value: Any

    def render(self, param_index: int) -> tuple[str, list[Any]]:
        """Render as SQL using placeholders starting at ``param_index``."""
        if self.operator in ("IN", "NOT IN"):
            values = list(self.value)
            if not values:
                # IN () is not valid SQL
                return ("FALSE" if self.operator == "IN" else "TRUE"), []
            placeholders = ", ".join(
                f"${param_index + i}" for i in range(len(values))
            )
            return f"{self.field} {self.operator} ({placeholders})", values

        if self.value is None:
            if self.operator == "=":
                return f"{self.field} IS NULL", []
            if self.operator in ("!=", "<>"):
                return f"{self.field} IS NOT NULL", []

        return f"{self.field} {self.operator} ${param_index}", [self.value]

    def matches(self, row: dict[str, Any]) -> bool:
        """Evaluate the condition against a row mapping."""
        actual = row.get(self.field)
        expected = self.value
        op = self.operator

        if op == "IN":
            return actual in list(expected)
        if op == "NOT IN":
            return actual not in list(expected)
        if op == "=":
            return actual == expected
        if op in ("!=", "<>"):
            return actual != expected
        # Comparisons with NULL are never true in SQL
        if actual is None or expected is None:
            return False
        if op == "<":
            return actual < expected
        if op == "<=":
            return actual <= expected
        if op == ">":
            return actual > expected
        return actual >= expected


class QueryBuilder:
    """
    Query builder over a single table.

    Usage:
        builder = QueryBuilder("paintings")
        query, params = builder.where("is_featured", True).order_by("display_order").build()
    """

    def __init__(self, table_name: str):
        self.table_name = table_name
        self.select_fields = "*"
        self.conditions: list[Condition] = []
        self.order_by_parts: list[tuple[str, str]] = []
        self.limit_count: int | None = None
        self.offset_count: int | None = None

    def _clone(self) -> "QueryBuilder":
        """Create a copy of the current QueryBuilder instance"""
        new_builder = QueryBuilder(self.table_name)
        new_builder.select_fields = self.select_fields
        new_builder.conditions = self.conditions.copy()
        new_builder.order_by_parts = self.order_by_parts.copy()
        new_builder.limit_count = self.limit_count
        new_builder.offset_count = self.offset_count
        return new_builder

    def _add_condition(self, field: str, operator: str, value: Any) -> "QueryBuilder":
        operator = operator.upper()
        if operator not in _OPERATORS:
            raise ValueError(f"Unsupported operator: {operator!r}")
        new_builder = self._clone()
        new_builder.conditions.append(
            Condition(_check_identifier(str(field)), operator, value)
        )
        return new_builder

    def select(self, *fields: str) -> "QueryBuilder":
        """Set the SELECT fields; defaults to * when none is provided."""
        new_builder = self._clone()
        if not fields:
            new_builder.select_fields = "*"
        else:
            new_builder.select_fields = ", ".join(
                _check_identifier(f.strip()) for f in fields
            )
        return new_builder

    def where(self, field: str, *args: Any) -> "QueryBuilder":
        """Add a WHERE condition, ANDed with the others.

        Supports both of the following call styles:
        - where(field, value) -> operator defaults to '='
        - where(field, operator, value) -> explicit operator in the second place
        """
        if len(args) == 2:
            operator, value = args
            return self._add_condition(field, operator, value)
        if len(args) == 1:
            return self._add_condition(field, "=", args[0])
        raise TypeError("where() expects (field, value) or (field, operator, value)")

    def where_in(self, field: str, values: Any | list[Any]) -> "QueryBuilder":
        if not isinstance(values, (list, tuple, set)):
            values = [values]
        return self._add_condition(field, "IN", tuple(values))

    def where_not_in(self, field: str, values: Any | list[Any]) -> "QueryBuilder":
        if not isinstance(values, (list, tuple, set)):
            values = [values]
        return self._add_condition(field, "NOT IN", tuple(values))

    def order_by(self, field: str) -> "QueryBuilder":
        """Add ORDER BY ascending for a field. Chain to add multiple fields."""
        new_builder = self._clone()
        new_builder.order_by_parts.append((_check_identifier(field), "ASC"))
        return new_builder

    def order_by_desc(self, field: str) -> "QueryBuilder":
        """Add ORDER BY ... DESC on the given field."""
        new_builder = self._clone()
        new_builder.order_by_parts.append((_check_identifier(field), "DESC"))
        return new_builder

    def limit(self, count: int) -> "QueryBuilder":
        """Set the LIMIT clause"""
        if count < 0:
            raise ValueError("Limit must be 0 or greater")
        new_builder = self._clone()
        new_builder.limit_count = count
        return new_builder

    def offset(self, count: int) -> "QueryBuilder":
        """Set the OFFSET clause"""
        if count < 0:
            raise ValueError("Offset must be 0 or greater")
        new_builder = self._clone()
        new_builder.offset_count = count
        return new_builder

    def matches(self, row: dict[str, Any]) -> bool:
        """True when ``row`` satisfies every condition."""
        return all(condition.matches(row) for condition in self.conditions)

    def _where_clause(self, start_index: int = 1) -> tuple[str, list[Any]]:
        parts: list[str] = []
        params: list[Any] = []
        for condition in self.conditions:
            sql, values = condition.render(start_index + len(params))
            parts.append(sql)
            params.extend(values)
        if not parts:
            return "", params
        return " WHERE " + " AND ".join(parts), params

    def build(self) -> tuple[str, list[Any]]:
        """Build the SELECT statement and its parameters"""
        where_clause, params = self._where_clause()
        query = f"SELECT {self.select_fields} FROM {self.table_name}{where_clause}"

        if self.order_by_parts:
            order = ", ".join(
                field if direction == "ASC" else f"{field} DESC"
                for field, direction in self.order_by_parts
            )
            query += f" ORDER BY {order}"

        if self.limit_count is not None:
            query += f" LIMIT {self.limit_count}"

        if self.offset_count is not None:
            query += f" OFFSET {self.offset_count}"

        return query, params

    def build_count(self) -> tuple[str, list[Any]]:
        """Build a COUNT(*) over the current conditions"""
        where_clause, params = self._where_clause()
        return f"SELECT COUNT(*) FROM {self.table_name}{where_clause}", params

    def build_insert(self, values: dict[str, Any]) -> tuple[str, list[Any]]:
        """Build an INSERT returning the stored row"""
        if not values:
            return f"INSERT INTO {self.table_name} DEFAULT VALUES RETURNING *", []

        columns = ", ".join(_check_identifier(column) for column in values)
        placeholders = ", ".join(f"${i + 1}" for i in range(len(values)))
        return (
            f"INSERT INTO {self.table_name} ({columns}) VALUES ({placeholders}) RETURNING *",
            list(values.values()),
        )

    def build_update(
        self, values: dict[str, Any], advancing: tuple[str, ...] = ()
    ) -> tuple[str, list[Any]]:
        """Build an UPDATE of the matching rows returning the new state.

        Columns named in ``advancing`` never move backwards: each takes the
        greater of the new value and its stored value plus one microsecond.
        """
        if not values:
            raise ValueError("Cannot update without values")
        if not self.conditions:
            raise ValueError("Cannot update without WHERE conditions")

        set_clause = ", ".join(
            _set_item(_check_identifier(column), i + 1, column in advancing)
            for i, column in enumerate(values)
        )
        params = list(values.values())
        where_clause, where_params = self._where_clause(start_index=len(params) + 1)
        return (
            f"UPDATE {self.table_name} SET {set_clause}{where_clause} RETURNING *",
            params + where_params,
        )

    def build_delete(self) -> tuple[str, list[Any]]:
        """Build a DELETE of the matching rows"""
        if not self.conditions:
            raise ValueError("Cannot delete without WHERE conditions")
        where_clause, params = self._where_clause()
        return f"DELETE FROM {self.table_name}{where_clause}", params

    def to_sql(self) -> str:
        """Return only the SQL query string without parameters"""
        query, _ = self.build()
        return query

    def __str__(self) -> str:
        query, params = self.build()
        return f"Query: {query}\nParams: {params}"

"""
This module provides the "Fluent" API for constructing InfluxQL queries.

A [`Query`][fluxclient.models.query.builders.Query] accumulates clause fragments
through method chaining and renders them into a single query string following a
fixed clause order:

`SELECT` -> `FROM` -> `WHERE` -> `GROUP BY` -> `ORDER BY` -> `FILL` -> `LIMIT`

The order in which clause methods are called across *different* clauses has no
effect on the output. Within the same clause, fragments are rendered in call order.
"""

from typing import Any, List, Optional


def _non_empty(parts: List[str]) -> List[str]:
    """Filters out empty fragments, preserving insertion order."""
    return [part for part in parts if part]


class Query:
    """
    A fluent builder for InfluxQL `SELECT` statements.

    Every clause method converts its argument with `str()`, stores it, and returns
    the same builder, so calls can be chained in a single expression. `fill()` and
    `limit()` hold a single value: the last call wins.

    Empty fragments passed to `where()`, `group_by()` or `order()` are kept in the
    builder but skipped at render time; a clause whose fragments are all empty is
    omitted entirely.

    Example:
        ```python
        from fluxclient import Query

        query = (
            Query()
            .select("mean(value)")
            .from_("cpu_usage_idle")
            .where("time > now() - 15m AND time <= now()")
            .group_by("host, time(10s)")
            .fill("100")
        )
        print(query)
        # SELECT mean(value) FROM cpu_usage_idle WHERE time > now() - 15m
        # AND time <= now() GROUP BY host, time(10s) FILL(100)
        ```
    """

    def __init__(self):
        self._select: List[str] = []
        self._from: List[str] = []
        self._where: List[str] = []
        self._group_by: List[str] = []
        self._order: List[str] = []
        self._fill: Optional[str] = None
        self._limit: Optional[int] = None

    # --- Clause Methods ---

    def select(self, part: Any) -> "Query":
        """Appends a field or expression to the `SELECT` clause."""
        self._select.append(str(part))
        return self

    def from_(self, part: Any) -> "Query":
        """
        Appends a measurement to the `FROM` clause.

        Named with a trailing underscore because `from` is a reserved word.
        """
        self._from.append(str(part))
        return self

    def where(self, part: Any) -> "Query":
        """Appends a predicate to the `WHERE` clause. Predicates are joined with `AND`."""
        self._where.append(str(part))
        return self

    def filter(self, part: Any) -> "Query":
        """Alias of [`where()`][fluxclient.models.query.builders.Query.where]."""
        return self.where(part)

    def group_by(self, part: Any) -> "Query":
        """Appends a tag key or time bucket to the `GROUP BY` clause."""
        self._group_by.append(str(part))
        return self

    def order(self, part: Any) -> "Query":
        """Appends an ordering term (e.g. `"time desc"`) to the `ORDER BY` clause."""
        self._order.append(str(part))
        return self

    def fill(self, part: Any) -> "Query":
        """Sets the `FILL(...)` option, replacing any previous value."""
        self._fill = str(part)
        return self

    def limit(self, count: int) -> "Query":
        """
        Sets the `LIMIT` option, replacing any previous value.

        Raises:
            ValueError: If `count` is negative.
        """
        count = int(count)
        if count < 0:
            raise ValueError(f"LIMIT must be a non-negative integer, got '{count}'")
        self._limit = count
        return self

    # --- Rendering ---

    def render(self) -> str:
        """
        Renders the accumulated clauses into a single query string.

        Rendering does not modify the builder; calling it repeatedly yields
        identical strings.
        """
        out = "SELECT " + (", ".join(self._select) if self._select else "*")

        if self._from:
            out += " FROM " + ", ".join(self._from)

        where = _non_empty(self._where)
        if where:
            out += " WHERE " + " AND ".join(where)

        group_by = _non_empty(self._group_by)
        if group_by:
            out += " GROUP BY " + ", ".join(group_by)

        order = _non_empty(self._order)
        if order:
            out += " ORDER BY " + ", ".join(order)

        if self._fill is not None:
            out += f" FILL({self._fill})"

        if self._limit is not None:
            out += f" LIMIT {self._limit}"

        return out

    def __str__(self) -> str:
        return self.render()

    def __repr__(self) -> str:
        return f"Query({self.render()!r})"

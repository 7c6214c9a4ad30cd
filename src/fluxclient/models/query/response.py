"""
Decoding of the query endpoint JSON response.

The database answers a (possibly batched) query with a nested document:

```json
{
    "results": [{
        "series": [{
            "name": "disk_total",
            "tags": {"path": "/var/lib/ceph/osd/ceph-0"},
            "columns": ["time", "fstype", "host", "value"],
            "values": [["2016-03-29T19:03:03Z", "xfs", "ip-172-31-29-130", 3203903488]]
        }]
    }]
}
```

This module flattens it into three levels:
[`QueryResponse`][fluxclient.models.query.response.QueryResponse] ->
[`ResultGroup`][fluxclient.models.query.response.ResultGroup] ->
[`Series`][fluxclient.models.query.response.Series], where each series holds a list of
[`Row`][fluxclient.models.query.response.Row] mappings keyed by column name.

Decoding never raises on malformed input: anything that does not fit the expected
shape degrades to a smaller, structurally valid result.
"""

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Mapping, Optional, Union

from ...logging_config import get_logger
from ..value import FloatValue, StringValue, Value

# Set the hierarchical logger
logger = get_logger(__name__)


def _stringify(value: Any) -> str:
    """Renders a JSON scalar as text: strings verbatim, everything else in JSON spelling."""
    if isinstance(value, str):
        return value
    return json.dumps(value)


def _classify_cell(cell: Any) -> Optional[Value]:
    """
    Maps a JSON cell to a typed value.

    Returns None for booleans, nulls, arrays and objects: the caller must not
    store anything for that column.
    """
    if isinstance(cell, str):
        return StringValue(data=cell)
    # bool is a subclass of int and must not become a number
    if isinstance(cell, bool):
        return None
    if isinstance(cell, (int, float)):
        try:
            return FloatValue(data=float(cell))
        except OverflowError:
            logger.debug(f"Numeric cell '{cell}' does not fit a 64-bit float, dropped")
            return None
    return None


class Row(Mapping[str, Value]):
    """
    One decoded data row, keyed by column name.

    A missing key means the column was either not returned or held a value that
    cannot be represented (boolean, null, array, object). Besides the standard
    read-only mapping interface, the row offers typed lookups with zero fallbacks.

    Example:
        ```python
        row = series.rows[0]
        speed = row.get_float("write_speed")   # 0.0 if missing or not numeric
        host = row.get_str("host")             # None if missing
        ```
    """

    def __init__(self, values: Optional[Mapping[str, Value]] = None):
        self._values: Dict[str, Value] = dict(values or {})

    def __getitem__(self, column: str) -> Value:
        return self._values[column]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"Row({self._values!r})"

    def get_float(self, column: str) -> float:
        """Returns the column as a float, `0.0` if missing or not numeric."""
        value = self._values.get(column)
        return value.as_float() if value is not None else 0.0

    def get_int(self, column: str) -> int:
        """Returns the column truncated to an int, `0` if missing or not numeric."""
        value = self._values.get(column)
        return value.as_int() if value is not None else 0

    def get_str(self, column: str) -> Optional[str]:
        """Returns the column rendered as text, None if missing."""
        value = self._values.get(column)
        return str(value) if value is not None else None

    @classmethod
    def _from_json(cls, columns: List[str], row: Any) -> "Row":
        values: Dict[str, Value] = {}
        if not isinstance(row, list):
            return cls(values)
        for index, column in enumerate(columns):
            if index >= len(row):
                break
            value = _classify_cell(row[index])
            if value is None:
                continue
            values[column] = value
        return cls(values)


@dataclass(frozen=True)
class Series:
    """
    One named table of rows returned for a measurement.

    Attributes:
        name (str): The measurement name.
        tags (Optional[Dict[str, str]]): The tag set identifying this series when
            the query grouped by tags, None when the response carried no tags.
            Tags are never merged into the rows.
        rows (List[Row]): The decoded rows, in response order.
    """

    name: str
    tags: Optional[Dict[str, str]] = None
    rows: List[Row] = field(default_factory=list)

    @property
    def columns(self) -> List[str]:
        """Column names seen across the rows, in first-seen order."""
        seen: Dict[str, None] = {}
        for row in self.rows:
            for column in row:
                seen.setdefault(column, None)
        return list(seen)

    def __len__(self) -> int:
        return len(self.rows)

    def __iter__(self) -> Iterator[Row]:
        return iter(self.rows)

    @classmethod
    def _from_json(cls, sdict: Any) -> "Series":
        if not isinstance(sdict, dict):
            return cls(name="null")

        tags_obj = sdict.get("tags")
        tags: Optional[Dict[str, str]] = None
        if isinstance(tags_obj, dict):
            tags = {str(k): _stringify(v) for k, v in tags_obj.items()}
        elif tags_obj is not None:
            logger.debug(f"Ignoring non-object 'tags' field: '{tags_obj!r}'")

        columns_obj = sdict.get("columns")
        columns = (
            [_stringify(c) for c in columns_obj] if isinstance(columns_obj, list) else []
        )

        values_obj = sdict.get("values")
        rows = (
            [Row._from_json(columns, row) for row in values_obj]
            if isinstance(values_obj, list)
            else []
        )

        return cls(name=_stringify(sdict.get("name")), tags=tags, rows=rows)


@dataclass(frozen=True)
class ResultGroup:
    """
    The result of one statement in a submitted batch.

    Attributes:
        series (List[Series]): The series returned by that statement.
    """

    series: List[Series] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.series)

    def __iter__(self) -> Iterator[Series]:
        return iter(self.series)

    def __getitem__(self, index: int) -> Series:
        return self.series[index]

    def is_empty(self) -> bool:
        """Returns True if the statement returned no series."""
        return len(self.series) == 0

    @classmethod
    def _from_json(cls, rdict: Any) -> "ResultGroup":
        series_obj = rdict.get("series") if isinstance(rdict, dict) else None
        if not isinstance(series_obj, list):
            return cls()
        return cls(series=[Series._from_json(s) for s in series_obj])


@dataclass(frozen=True)
class QueryResponse:
    """
    The decoded response of one HTTP query call.

    Holds one [`ResultGroup`][fluxclient.models.query.response.ResultGroup] per
    statement submitted in the batch. An empty response (zero groups) signals that
    the body could not be decoded at all.

    Example:
        ```python
        from fluxclient import QueryResponse

        response = QueryResponse.from_json(body)
        for group in response:
            for series in group:
                print(series.name, series.tags)
                for row in series:
                    print(row.get_float("value"))
        ```

    Attributes:
        results (List[ResultGroup]): The result groups, in statement order.
    """

    results: List[ResultGroup] = field(default_factory=list)

    @classmethod
    def from_json(
        cls,
        text: Union[str, bytes],
        logger: Optional[logging.Logger] = None,
    ) -> "QueryResponse":
        """
        Decodes a raw JSON document into a `QueryResponse`.

        This method never raises on malformed input. A parse error is reported on
        `logger` and yields an empty response; a missing or non-array `results`
        field also yields an empty response.

        Args:
            text: The raw response body.
            logger: The diagnostic sink for parse errors. Defaults to this module's
                logger; pass a disabled logger to silence it.
        """
        log = logger if logger is not None else get_logger(__name__)
        try:
            data = json.loads(text)
        except (ValueError, TypeError, RecursionError) as e:
            log.warning(f"Error parsing JSON response: '{e}'")
            return cls()

        results = data.get("results") if isinstance(data, dict) else None
        if not isinstance(results, list):
            return cls()

        try:
            return cls(results=[ResultGroup._from_json(r) for r in results])
        except RecursionError as e:
            # nested tag values or column names too deep to stringify
            log.warning(f"Error decoding JSON response: '{e}'")
            return cls()

    def __len__(self) -> int:
        """Returns the number of result groups in the response."""
        return len(self.results)

    def __iter__(self) -> Iterator[ResultGroup]:
        """Iterates over the result groups."""
        return iter(self.results)

    def __getitem__(self, index: int) -> ResultGroup:
        """Retrieves a result group by its index."""
        return self.results[index]

    def is_empty(self) -> bool:
        """Returns True if the response contains no result groups."""
        return len(self.results) == 0


def decode_response(
    text: Union[str, bytes], logger: Optional[logging.Logger] = None
) -> QueryResponse:
    """Shortcut for [`QueryResponse.from_json`][fluxclient.models.query.response.QueryResponse.from_json]."""
    return QueryResponse.from_json(text, logger=logger)

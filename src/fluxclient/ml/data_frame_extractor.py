from typing import Any, Dict, List

import pandas as pd

from fluxclient.logging_config import get_logger
from fluxclient.models.query import QueryResponse, Series

# Set the hierarchical logger
logger = get_logger(__name__)

TAG_PREFIX = "tag."
RESULT_COLUMN = "_result"
SERIES_COLUMN = "_series"


def _check_collisions(existing: List[str], added: List[str], what: str, name: str):
    clashes = [c for c in added if c in existing]
    if clashes:
        raise ValueError(
            f"Series '{name}': {what} columns {clashes} collide with data columns"
        )


def series_to_pandas(series: Series) -> pd.DataFrame:
    """
    Converts a single series into a pandas DataFrame.

    Each row-map becomes a DataFrame row. Columns follow first-seen order across
    the rows; cells missing from a row (absent or unrepresentable values) become
    `NaN`. String values stay strings, numeric values are floats. If the series is
    tagged, every tag is appended as a constant column named `tag.<key>`.

    Args:
        series (Series): The decoded series.

    Returns:
        pd.DataFrame: One row per series row.

    Raises:
        ValueError: If a `tag.<key>` column name is already used by a data column.
    """
    columns = series.columns
    records: List[Dict[str, Any]] = [
        {column: row[column].data for column in row} for row in series.rows
    ]
    df = pd.DataFrame.from_records(records, columns=columns)

    tags = series.tags or {}
    _check_collisions(
        columns, [f"{TAG_PREFIX}{key}" for key in tags], "tag", series.name
    )
    for key, value in tags.items():
        df[f"{TAG_PREFIX}{key}"] = value
    return df


class DataFrameExtractor:
    """
    Flattens a [`QueryResponse`][fluxclient.models.query.response.QueryResponse] into a
    single pandas DataFrame for analysis.

    Rows of every series are stacked; two extra columns record their origin:

    - `_result`: the index of the result group (statement) in the batch.
    - `_series`: the series (measurement) name.

    The underscore keeps them apart from ordinary field names such as `series`.
    A series that does return a `_result` or `_series` column cannot be stacked and
    makes `to_pandas()` raise `ValueError`.

    Example:
        ```python
        from fluxclient import InfluxClient, Query, QueryResponse
        from fluxclient.ml import DataFrameExtractor

        with InfluxClient.connect("127.0.0.1:8086") as client:
            groups = client.query_batch("telegraf", [Query().from_("cpu").limit(100)])
            df = DataFrameExtractor(QueryResponse(results=groups)).to_pandas()
        ```
    """

    def __init__(self, response: QueryResponse):
        self._response = response

    def to_pandas(self) -> pd.DataFrame:
        """
        Returns the stacked DataFrame. An empty response yields an empty DataFrame
        with only the `_result` and `_series` columns.

        Raises:
            ValueError: If a series already has a column named `_result`,
                `_series` or `tag.<key>` for one of its tags.
        """
        frames: List[pd.DataFrame] = []
        for index, group in enumerate(self._response):
            for series in group:
                df = series_to_pandas(series)
                _check_collisions(
                    list(df.columns),
                    [RESULT_COLUMN, SERIES_COLUMN],
                    "origin",
                    series.name,
                )
                df.insert(0, SERIES_COLUMN, series.name)
                df.insert(0, RESULT_COLUMN, index)
                frames.append(df)

        if not frames:
            logger.debug("No series to extract, returning an empty DataFrame")
            return pd.DataFrame(columns=[RESULT_COLUMN, SERIES_COLUMN])

        return pd.concat(frames, ignore_index=True, sort=False)

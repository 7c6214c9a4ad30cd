"""
InfluxDB Client Entry Point.

This module provides the `InfluxClient`, the interface used to send queries to the
database HTTP endpoint. It owns the underlying `httpx.Client`, renders query
builders to their wire text, and decodes the JSON response into a
[`QueryResponse`][fluxclient.models.query.response.QueryResponse].
"""

import logging
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Type

import httpx

from ..logging_config import get_logger
from ..models.query import QueryLike, QueryResponse, ResultGroup, render_query
from .config import ClientConfig

# Set the hierarchical logger
logger = get_logger(__name__)

BATCH_SEPARATOR = ";"


class _ConnectionStatus(Enum):
    Open = "open"
    Closed = "closed"


def build_query_params(db: str, queries: Sequence[QueryLike]) -> Dict[str, str]:
    """
    Builds the URL parameters for a batched query.

    Each query is rendered to text and the statements are joined with `;`, the
    separator the endpoint uses to split a batch into result groups.

    Raises:
        ValueError: If `db` is empty or no queries are given.
    """
    if not db:
        raise ValueError("Empty database name")
    if not queries:
        raise ValueError("Expected at least one query")
    return {
        "db": db,
        "q": BATCH_SEPARATOR.join(render_query(q) for q in queries),
    }


class InfluxClient:
    """
    The gateway to the database HTTP query interface.

    Tip: Context Manager Usage
        The `InfluxClient` is best used as a context manager to ensure the
        underlying HTTP connection is closed.

        ```python
        from fluxclient import InfluxClient, Query

        with InfluxClient.connect("127.0.0.1:8086") as client:
            group = client.query("telegraf", Query().select("*").from_("cpu").limit(10))
            for series in group:
                print(series.name, len(series.rows))
        ```

    Transport failures are never raised to the caller: they are logged and turn
    into empty results.
    """

    # --- Private Sentinel Value ---
    # Used to ensure the constructor is only called via the factory methods.
    _CONNECT_SENTINEL = object()

    def __init__(
        self,
        *,
        config: ClientConfig,
        http_client: httpx.Client,
        logger: logging.Logger,
        sentinel: object,
    ):
        """
        **Internal Constructor** (do not call this directly). Please use
        [`connect()`][fluxclient.comm.InfluxClient.connect] or
        [`from_config()`][fluxclient.comm.InfluxClient.from_config] instead.

        Raises:
            RuntimeError: If the class is instantiated directly.
        """
        if sentinel is not InfluxClient._CONNECT_SENTINEL:
            raise RuntimeError(
                "InfluxClient must be instantiated using InfluxClient.connect() or InfluxClient.from_config()."
            )

        self._config = config
        """The connection settings"""
        self._http_client = http_client
        """The HTTP client used for every request"""
        self._logger = logger
        """The diagnostic sink for transport and decoding failures"""
        self._status: _ConnectionStatus = _ConnectionStatus.Open
        """Tracks the current connection status (Open/Closed)."""

    @classmethod
    def from_config(
        cls,
        config: ClientConfig,
        transport: Optional[httpx.BaseTransport] = None,
        logger: Optional[logging.Logger] = None,
    ) -> "InfluxClient":
        """
        Creates a client from a [`ClientConfig`][fluxclient.comm.ClientConfig].

        Args:
            config: The connection settings.
            transport: An optional `httpx` transport, e.g. `httpx.MockTransport`
                in tests.
            logger: The diagnostic sink. Defaults to this module's logger.
        """
        http_client = httpx.Client(
            timeout=config.timeout,
            headers=config.headers,
            transport=transport,
        )
        return cls(
            config=config,
            http_client=http_client,
            logger=logger if logger is not None else get_logger(__name__),
            sentinel=cls._CONNECT_SENTINEL,
        )

    @classmethod
    def connect(
        cls,
        host: str,
        timeout: float = 5.0,
        transport: Optional[httpx.BaseTransport] = None,
        logger: Optional[logging.Logger] = None,
    ) -> "InfluxClient":
        """
        The primary entry point to the database.

        Args:
            host (str): The server address, either a URL (`http://db:8086`) or a
                bare `host:port`.
            timeout (float): Maximum time in seconds to wait for a response.
                Defaults to 5.
            transport: An optional `httpx` transport.
            logger: The diagnostic sink. Defaults to this module's logger.

        Returns:
            InfluxClient: A client ready to send queries.
        """
        logger_ = logger if logger is not None else get_logger(__name__)
        config = ClientConfig(host=host, timeout=timeout)
        logger_.debug(f"Opening a client for '{config.host}'")
        return cls.from_config(config, transport=transport, logger=logger_)

    # --- Context Manager Protocol ---

    def __enter__(self) -> "InfluxClient":
        return self

    def __exit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc_val: Optional[BaseException],
        exc_tb: Optional[Any],
    ) -> None:
        self.close()

    def __del__(self):
        """Failsafe if close() is not explicitly called."""
        if getattr(self, "_status", None) == _ConnectionStatus.Open:
            logger.warning(
                "InfluxClient destroyed without calling close(). "
                "Resources may not have been released properly."
            )

    @property
    def host(self) -> str:
        """The normalized base URL of the database."""
        return self._config.host

    # --- Main API Methods ---

    def query(self, db: str, query: QueryLike) -> ResultGroup:
        """
        Executes a single query.

        Args:
            db (str): The database name.
            query: A [`Query`][fluxclient.models.query.builders.Query] builder, any
                object implementing `render()`, or a raw query string.

        Returns:
            ResultGroup: The result of the statement, empty on any failure.
        """
        results = self.query_batch(db, [query])
        if results:
            return results[0]
        return ResultGroup()

    def query_batch(self, db: str, queries: Sequence[QueryLike]) -> List[ResultGroup]:
        """
        Executes several queries in one HTTP request.

        The statements are joined with `;` and the response holds one
        [`ResultGroup`][fluxclient.models.query.response.ResultGroup] per statement,
        in submission order.

        Args:
            db (str): The database name.
            queries: The queries to run.

        Returns:
            List[ResultGroup]: The decoded groups, or an empty list if the request
                failed or the body could not be decoded.

        Raises:
            ValueError: If no queries are given or `db` is empty.
            RuntimeError: If the client has been closed.
        """
        if self._status == _ConnectionStatus.Closed:
            raise RuntimeError("InfluxClient is closed")

        params = build_query_params(db, queries)
        self._logger.debug(f"Sending query to '{self._config.query_url}': '{params['q']}'")

        try:
            response = self._http_client.get(self._config.query_url, params=params)
            response.raise_for_status()
            body = response.text
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            self._logger.error(f"Influx query returned an error: '{e}'")
            return []

        return QueryResponse.from_json(body, logger=self._logger).results

    def close(self):
        """
        Closes the underlying HTTP client. Further queries raise `RuntimeError`.

        Invoked automatically when the client is used as a context manager.
        """
        if self._status == _ConnectionStatus.Open:
            self._http_client.close()
            self._status = _ConnectionStatus.Closed
            self._logger.debug(f"Client for '{self._config.host}' closed")

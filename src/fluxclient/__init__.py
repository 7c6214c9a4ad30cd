"""
fluxclient - Python client for the InfluxDB HTTP query interface.

This module provides the main entry points:

- **Query**: A fluent builder rendering InfluxQL `SELECT` statements.
- **QueryResponse**: The decoder turning the JSON response into typed rows.
- **InfluxClient**: A thin HTTP client issuing queries and batches.

Example:
    >>> from fluxclient import InfluxClient, Query
    >>> with InfluxClient.connect("127.0.0.1:8086") as client:
    ...     group = client.query("telegraf", Query().select("*").from_("cpu").limit(1))
"""

# --- Client ---
from .comm import InfluxClient as InfluxClient, ClientConfig as ClientConfig

# --- Query Builder & Response ---
from .models.query import (
    Query as Query,
    QueryLike as QueryLike,
    RenderableProtocol as RenderableProtocol,
    QueryResponse as QueryResponse,
    ResultGroup as ResultGroup,
    Series as Series,
    Row as Row,
    decode_response as decode_response,
)

# --- Values ---
from .models import (
    Value as Value,
    StringValue as StringValue,
    FloatValue as FloatValue,
)

# --- Logging ---
from .logging_config import (
    get_logger as get_logger,
    setup_sdk_logging as setup_sdk_logging,
)

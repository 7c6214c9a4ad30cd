"""
Configuration Module.

This module defines the settings used to reach the database HTTP endpoint.
Every field can be overridden through environment variables following the
pattern `FLUX_{PARAMETER}`:

    FLUX_HOST=influx:8086
    FLUX_TIMEOUT=2.5
    FLUX_HEADERS='{"X-Request-Source": "batch"}'
"""

from typing import Dict

import httpx
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_HOST = "127.0.0.1:8086"
DEFAULT_TIMEOUT = 5.0


class ClientConfig(BaseSettings):
    """
    Connection settings for the [`InfluxClient`][fluxclient.comm.InfluxClient].

    Values passed to the constructor take precedence over the environment.
    The `host` is normalized on validation: a bare `host:port` gets an `http://`
    scheme and any trailing `/` is removed. Hosts that do not parse as a URL are
    rejected here, before any request is attempted.
    """

    model_config = SettingsConfigDict(
        env_prefix="FLUX_", case_sensitive=False, extra="ignore", validate_default=True
    )

    host: str = Field(
        default=DEFAULT_HOST,
        description="Base URL of the database; queries are sent to `<host>/query`",
    )

    timeout: float = Field(
        default=DEFAULT_TIMEOUT,
        gt=0,
        description="Maximum time in seconds to wait for a response",
    )

    headers: Dict[str, str] = Field(
        default_factory=dict,
        description="Extra HTTP headers sent with every request",
    )

    @field_validator("host")
    @classmethod
    def validate_host(cls, v: str) -> str:
        """Adds a missing scheme, strips trailing slashes and checks the URL parses."""
        v = v.strip()
        if not v:
            raise ValueError("Empty host")
        if not v.startswith(("http://", "https://")):
            v = f"http://{v}"
        v = v.rstrip("/")
        try:
            url = httpx.URL(v)
        except httpx.InvalidURL as e:
            raise ValueError(f"Invalid host '{v}': {e}")
        if not url.host:
            raise ValueError(f"Invalid host '{v}': missing host name")
        return v

    @property
    def query_url(self) -> str:
        """The full URL of the query endpoint."""
        return f"{self.host}/query"

    @classmethod
    def from_env(cls, prefix: str = "FLUX_") -> "ClientConfig":
        """
        Builds a configuration from environment variables named `<prefix>HOST`,
        `<prefix>TIMEOUT` and `<prefix>HEADERS`, falling back to the defaults.

        Raises:
            pydantic.ValidationError: If a variable holds an invalid value.
        """
        return cls(_env_prefix=prefix)

"""
Logging for the query client.

Every module logs under the `fluxclient` namespace (`fluxclient.comm.influx_client`,
`fluxclient.models.query.response`, ...). Nothing is printed until the application
calls `setup_sdk_logging()`: transport failures and undecodable responses are
otherwise only visible to handlers the application attaches itself.
"""

import logging as root_logging
import sys
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

_SDK_LOGGER_NAME = "fluxclient"

root_logging.getLogger(_SDK_LOGGER_NAME).addHandler(root_logging.NullHandler())


def setup_sdk_logging(
    level="INFO",
    pretty: bool = False,
    console: Optional[Console] = None,
    propagate: bool = False,
):
    """
    Attaches a single output handler to the `fluxclient` logger.

    Use it from scripts and notebooks to see the query text sent to the server
    (`DEBUG`), failed requests (`ERROR`) and responses that could not be decoded
    (`WARNING`). Calling it again replaces the previous handler.

    Args:
        level (str): Threshold for client records, e.g. "DEBUG" to trace every
            query. Defaults to "INFO".
        pretty (bool): Render records through a `rich` handler instead of a plain
            stderr stream.
        console (Optional[rich.console.Console]): Console for the `rich` handler.
            Defaults to `Console(stderr=True)`.
        propagate (bool): Also pass records on to the root logger. Off by default
            so that an application-level handler does not print them twice.
    """
    logger = root_logging.getLogger(_SDK_LOGGER_NAME)

    if logger.hasHandlers():
        logger.handlers.clear()

    if pretty:
        # colored records with rich tracebacks
        console = console or Console(stderr=True)

        handler = RichHandler(
            level=level,
            console=console,
            show_time=True,
            show_path=True,
            markup=True,
            rich_tracebacks=True,
            log_time_format="[%X]",
        )
        formatter = root_logging.Formatter(
            fmt="[dim white]%(name)s[/dim white]: %(message)s", datefmt="[%X]"
        )
        handler.setFormatter(formatter)
        init_message = f"fluxclient logging set at level: [bold]{level}[/bold]"
        extra = {"markup": True}
    else:
        # plain stderr lines
        handler = root_logging.StreamHandler(sys.stderr)
        formatter = root_logging.Formatter(
            fmt="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        handler.setFormatter(formatter)
        init_message = f"fluxclient logging set at level: {level}"
        extra = {}

    logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = propagate

    logger.info(init_message, extra=extra)


def get_logger(name: Optional[str] = None) -> root_logging.Logger:
    """
    Returns the logger for a client module, or the `fluxclient` root when `name`
    is None. Modules pass `__name__` so their records inherit the handler set up by
    `setup_sdk_logging()`.
    """
    if name is not None:
        return root_logging.getLogger(name=name)
    return root_logging.getLogger(_SDK_LOGGER_NAME)

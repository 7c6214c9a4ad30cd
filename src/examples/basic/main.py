"""
fluxclient: Basic Query Example.

This script demonstrates a complete round trip:
1. Building an aggregation query with the fluent `Query` builder.
2. Sending it to the database configured by the `FLUX_HOST` environment variable
   (default `127.0.0.1:8086`).
3. Printing the decoded series as Rich tables.
"""

import sys

from rich.console import Console
from rich.table import Table

from fluxclient import ClientConfig, InfluxClient, Query, setup_sdk_logging

DATABASE = "telegraf"

# Initialize Rich Console for terminal output
console = Console()


def main() -> int:
    setup_sdk_logging(level="INFO", pretty=True, console=console)

    query = (
        Query()
        .select("mean(value)")
        .from_("cpu_usage_idle")
        .where("time > now() - 15m AND time <= now()")
        .group_by("host, time(10s)")
        .fill("100")
    )
    assert str(query) == (
        "SELECT mean(value) FROM cpu_usage_idle WHERE time > now() - 15m AND time <= now() "
        "GROUP BY host, time(10s) FILL(100)"
    )

    config = ClientConfig.from_env()
    console.print(f"Querying [bold]{config.host}[/bold]: {query}")

    with InfluxClient.from_config(config) as client:
        group = client.query(DATABASE, query)

    if group.is_empty():
        console.print("[yellow]No series returned.[/yellow]")
        return 1

    for series in group:
        table = Table(title=f"{series.name} {series.tags or ''}")
        columns = series.columns
        for column in columns:
            table.add_column(column)
        for row in series:
            table.add_row(*[row.get_str(c) or "" for c in columns])
        console.print(table)
    return 0


if __name__ == "__main__":
    sys.exit(main())

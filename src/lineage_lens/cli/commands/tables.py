"""
Tables Command - List the immediate upstream or downstream tables of a node.
"""

import json
import sys

import click
from rich.console import Console
from rich.table import Table

from ...core.query import connected_tables
from ...core.types import Direction
from ..utils import echo_info, load_project

console = Console()


@click.command()
@click.argument("table")
@click.option("--downstream", is_flag=True, help="List consumers instead of inputs")
@click.option(
    "--project-dir",
    "-p",
    type=click.Path(exists=True, file_okay=False),
    default=".",
    help="dbt project directory (or any directory inside it)",
)
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def tables(table: str, downstream: bool, project_dir: str, as_json: bool) -> None:
    """
    Show the tables directly connected to TABLE.

    TABLE is a full node key such as model.jaffle_shop.orders.

    \b
    Examples:
        lineage-lens tables model.jaffle_shop.orders
        lineage-lens tables model.jaffle_shop.stg_orders --downstream
    """
    loaded = load_project(project_dir)
    if loaded is None:
        sys.exit(1)
    _, snapshot = loaded

    direction = Direction.DOWNSTREAM if downstream else Direction.UPSTREAM
    rows = connected_tables(snapshot, direction, table)

    if as_json:
        click.echo(json.dumps({"tables": [row.model_dump() for row in rows]}, indent=2))
        return

    if not rows:
        echo_info(f"No {direction.value} tables for {table}")
        return

    out = Table(title=f"{direction.value.capitalize()} of {table}")
    out.add_column("Label", style="cyan")
    out.add_column("Node")
    out.add_column(f"Further {direction.value}", justify="right")
    out.add_column("File", style="dim")
    for row in rows:
        out.add_row(row.label, row.table, str(row.count), row.url)

    console.print(out)

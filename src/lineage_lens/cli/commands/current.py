"""
Current Command - Resolve a model file to its graph node.
"""

import json
import sys
from pathlib import Path

import click

from ...config import LensConfig
from ...core.context import ActiveFile
from ...core.resolver import resolve_node
from ..utils import echo_warning, load_project


@click.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def current(file: str, as_json: bool) -> None:
    """
    Show the node a model FILE corresponds to and its immediate degrees.

    The dbt project is located by walking up from FILE.
    """
    path = Path(file).resolve()
    loaded = load_project(str(path.parent))
    if loaded is None:
        sys.exit(1)
    project_root, snapshot = loaded

    config = LensConfig.load(project_root)
    node = resolve_node(snapshot, ActiveFile.from_path(path, config.model_extensions), config.node_kind)

    if node is None:
        if as_json:
            click.echo(json.dumps({"node": None}))
            return
        echo_warning(f"No unique {config.node_kind} node matches {path.name}")
        return

    if as_json:
        click.echo(json.dumps({"node": node.to_message()}, indent=2))
        return

    click.echo()
    click.echo(f"📍 {click.style(node.table, bold=True)}")
    click.echo(f"   Upstream:   {node.upstream_count}")
    click.echo(f"   Downstream: {node.downstream_count}")

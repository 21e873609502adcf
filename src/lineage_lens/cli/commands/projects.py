"""
Projects Command - List the dbt projects of a workspace.
"""

from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from ...config import LensConfig
from ...parsing.projects import discover_projects
from ..utils import echo_warning

console = Console()


@click.command()
@click.argument("root", default=".", type=click.Path(exists=True, file_okay=False))
def projects(root: str) -> None:
    """
    List dbt projects under ROOT and whether their manifest is compiled.
    """
    roots = discover_projects(Path(root))
    if not roots:
        echo_warning(f"No dbt projects found under {root}")
        return

    config = LensConfig.load(Path(root).resolve())

    out = Table(title="dbt projects")
    out.add_column("Project", style="cyan")
    out.add_column("Manifest")
    for project_root in roots:
        manifest = config.manifest_path(project_root)
        status = "[green]ready[/green]" if manifest.exists() else "[yellow]missing[/yellow]"
        out.add_row(str(project_root), status)

    console.print(out)

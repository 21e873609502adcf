"""
CLI Utilities - Shared helper functions for command line operations.

Styled messages and loading of a project's snapshot for one-shot queries.
"""

from pathlib import Path
from typing import Optional

import click

from ..config import LensConfig
from ..core.result import Err
from ..core.types import GraphSnapshot
from ..parsing.manifest import load_snapshot
from ..parsing.projects import is_project_root


def echo_success(message: str) -> None:
    """Print a success message with a green checkmark."""
    click.echo(click.style(f"✅ {message}", fg="green"))


def echo_error(message: str) -> None:
    """Print an error message with a red cross, to stderr."""
    click.echo(click.style(f"❌ {message}", fg="red"), err=True)


def echo_warning(message: str) -> None:
    """Print a warning message with a yellow alert symbol."""
    click.echo(click.style(f"⚠️  {message}", fg="yellow"))


def echo_info(message: str) -> None:
    """Print an informational message, dimmed."""
    click.echo(click.style(message, dim=True))


def find_project_root(start: Path) -> Optional[Path]:
    """Walk up from `start` to the nearest directory holding dbt_project.yml."""
    start = start.resolve()
    for candidate in (start, *start.parents):
        if is_project_root(candidate):
            return candidate
    return None


def load_project(project_dir: str) -> Optional[tuple[Path, GraphSnapshot]]:
    """
    Locate the dbt project at or above `project_dir` and load its snapshot.

    Prints an error and returns None on failure.
    """
    project_root = find_project_root(Path(project_dir))
    if project_root is None:
        echo_error(f"No dbt_project.yml found at or above {project_dir}")
        return None

    config = LensConfig.load(project_root)
    result = load_snapshot(project_root, config)
    if isinstance(result, Err):
        echo_error(result.error)
        return None

    return project_root, result.unwrap()

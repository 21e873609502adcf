"""
dbt project parsing for lineage-lens.

Usage:
    from lineage_lens.parsing import discover_projects, load_snapshot

    for root in discover_projects(Path(".")):
        result = load_snapshot(root)
        if result.is_ok():
            snapshot = result.unwrap()
"""

from .manifest import build_snapshot, load_snapshot
from .projects import discover_projects, is_project_root, read_project_file

__all__ = [
    "build_snapshot",
    "discover_projects",
    "is_project_root",
    "load_snapshot",
    "read_project_file",
]

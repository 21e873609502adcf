"""
dbt project discovery.

Finds every dbt project below a workspace root, i.e. every directory holding
a dbt_project.yml, without descending into environments, VCS metadata or
installed dbt packages.
"""

import logging
import os
from pathlib import Path
from typing import Any, Dict, List

import yaml

from ..config import PROJECT_FILE, is_ignored_directory

logger = logging.getLogger(__name__)


def discover_projects(root: Path) -> List[Path]:
    """
    Return the resolved roots of all dbt projects under `root`, sorted.

    The workspace root itself counts when it contains dbt_project.yml.
    """
    root = root.resolve()
    if not root.is_dir():
        return []

    projects: List[Path] = []
    for dirpath, dirnames, filenames in os.walk(root):
        # Prune in place so os.walk skips these subtrees
        dirnames[:] = sorted(d for d in dirnames if not is_ignored_directory(d))
        if PROJECT_FILE in filenames:
            projects.append(Path(dirpath))

    logger.info(f"Discovered {len(projects)} dbt project(s) under {root}")
    return sorted(projects)


def is_project_root(path: Path) -> bool:
    return (path / PROJECT_FILE).is_file()


def read_project_file(project_root: Path) -> Dict[str, Any]:
    """Parsed dbt_project.yml, or an empty dict when it is missing or unreadable."""
    path = project_root / PROJECT_FILE
    try:
        with open(path, "r") as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        logger.debug(f"Cannot read {path}: {e}")
        return {}
    return data if isinstance(data, dict) else {}

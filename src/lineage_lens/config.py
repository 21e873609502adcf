"""
Global Configuration and Defaults.

This module centralizes the defaults used to discover dbt projects, locate
their compiled manifests, and map editor files onto graph nodes.
Per-workspace overrides are read from `.lineage/config.yaml`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Set, Tuple

import yaml

logger = logging.getLogger(__name__)

# --- dbt Layout ---
# Marks the root directory of a dbt project
PROJECT_FILE = "dbt_project.yml"

# Compiled artifact produced by `dbt parse` / `dbt compile`
MANIFEST_FILE = "manifest.json"

# Default dbt target directory, relative to the project root
DEFAULT_TARGET_PATH = "target"

# Where `dbt deps` installs packages unless packages-install-path says otherwise
DEFAULT_PACKAGES_PATH = "dbt_packages"

# --- Node Resolution ---
# Only keys of this kind are candidates for the "current node" of a file
DEFAULT_NODE_KIND = "model"

# Extensions stripped from a file name to obtain its model name
DEFAULT_MODEL_EXTENSIONS: Tuple[str, ...] = (".sql", ".py")

# Workspace-local config file
CONFIG_PATH = Path(".lineage") / "config.yaml"

# --- Blocklists ---

# Directories to completely ignore while looking for dbt projects
IGNORE_DIRECTORIES: Set[str] = {
    # Version Control
    ".git",
    ".svn",
    ".hg",
    # Environments & Dependencies
    ".venv",
    "venv",
    "env",
    ".env",
    "node_modules",
    "site-packages",
    "__pycache__",
    ".mypy_cache",
    ".pytest_cache",
    ".ruff_cache",
    # IDEs
    ".idea",
    ".vscode",
    # dbt generated/installed content
    "target",
    "dbt_packages",
    "dbt_modules",
    "logs",
    # Lineage internal
    ".lineage",
}


def is_ignored_directory(dir_name: str) -> bool:
    """Check if directory name is in the blocklist."""
    return dir_name in IGNORE_DIRECTORIES


@dataclass
class LensConfig:
    """
    Workspace configuration.

    Attributes:
        node_kind: Key prefix (without the dot) a node must carry to be
            resolved from a file, e.g. "model".
        model_extensions: File extensions stripped before matching.
        target_path: dbt target directory relative to each project root.
        include_tests: Keep dbt test nodes in snapshots.
        extra: Unknown keys found in the config file, kept for diagnostics.
    """

    node_kind: str = DEFAULT_NODE_KIND
    model_extensions: Tuple[str, ...] = DEFAULT_MODEL_EXTENSIONS
    target_path: str = DEFAULT_TARGET_PATH
    include_tests: bool = False
    extra: Dict[str, Any] = field(default_factory=dict)

    @property
    def node_prefix(self) -> str:
        return f"{self.node_kind}."

    def manifest_path(self, project_root: Path) -> Path:
        """Location of the compiled manifest for a project."""
        return project_root / self.target_path / MANIFEST_FILE

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LensConfig":
        known = {"node_kind", "model_extensions", "target_path", "include_tests"}
        config = cls(extra={k: v for k, v in data.items() if k not in known})

        if "node_kind" in data:
            config.node_kind = str(data["node_kind"]).rstrip(".")
        if "model_extensions" in data:
            exts = data["model_extensions"] or []
            if isinstance(exts, str):
                exts = [exts]
            config.model_extensions = tuple(
                e if e.startswith(".") else f".{e}" for e in map(str, exts)
            )
        if "target_path" in data:
            config.target_path = str(data["target_path"])
        if "include_tests" in data:
            config.include_tests = bool(data["include_tests"])

        return config

    @classmethod
    def load(cls, root: Path) -> "LensConfig":
        """
        Load the workspace config, falling back to defaults.

        A missing file is normal. An unreadable or malformed file is logged
        and ignored so the editor integration keeps working.
        """
        path = root / CONFIG_PATH
        if not path.exists():
            return cls()

        try:
            with open(path, "r") as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            logger.warning(f"Failed to read {path}: {e}")
            return cls()

        if not isinstance(data, dict):
            logger.warning(f"Ignoring {path}: expected a mapping at the top level")
            return cls()

        config = cls.from_dict(data)
        if config.extra:
            logger.debug(f"Unknown config keys in {path}: {sorted(config.extra)}")
        return config

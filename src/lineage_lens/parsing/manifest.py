"""
dbt manifest.json -> GraphSnapshot.

Reads the compiled manifest of a dbt project and builds its table-level
snapshot:

- `parent_map[node]` lists what the node depends on -> depends_on view.
- `child_map[node]` lists what depends on the node -> depended_on_by view.

Older or partial manifests without these maps are handled by deriving them
from each node's `depends_on.nodes`.
"""

from __future__ import annotations

import json
import logging
from collections import defaultdict
from pathlib import Path
from typing import Any, Dict, List, Optional

from ..config import DEFAULT_PACKAGES_PATH, LensConfig
from ..core.result import Err, Ok, Result
from ..core.types import GraphSnapshot, NeighborRef
from .projects import read_project_file

logger = logging.getLogger(__name__)

# Manifest sections that hold graph nodes
NODE_SECTIONS = ("nodes", "sources", "exposures", "metrics", "semantic_models", "saved_queries")

TEST_PREFIX = "test."


def load_snapshot(project_root: Path, config: Optional[LensConfig] = None) -> Result[GraphSnapshot, str]:
    """
    Load the snapshot of a project from its compiled manifest.

    Args:
        project_root: Directory containing dbt_project.yml.
        config: Workspace configuration (target path, test filtering).

    Returns:
        Ok(GraphSnapshot), or Err describing why the manifest is unusable.
    """
    config = config or LensConfig()
    manifest_path = config.manifest_path(project_root)

    if not manifest_path.exists():
        return Err(f"No manifest at {manifest_path}. Run 'dbt parse' first.")

    try:
        with open(manifest_path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        return Err(f"Invalid JSON in {manifest_path}: {e}")
    except OSError as e:
        return Err(f"Cannot read {manifest_path}: {e}")

    if not isinstance(data, dict):
        return Err(f"Unexpected manifest format in {manifest_path}")

    project = read_project_file(project_root)
    snapshot = build_snapshot(
        data,
        project_root,
        include_tests=config.include_tests,
        project_name=project.get("name"),
        packages_path=project.get("packages-install-path") or DEFAULT_PACKAGES_PATH,
    )
    logger.info(f"Loaded {manifest_path} ({snapshot.node_count} nodes)")
    return Ok(snapshot)


def build_snapshot(
    manifest: Dict[str, Any],
    project_root: Path,
    include_tests: bool = False,
    project_name: Optional[str] = None,
    packages_path: str = DEFAULT_PACKAGES_PATH,
) -> GraphSnapshot:
    """
    Build a snapshot from an already parsed manifest document.

    `project_name` identifies the root project; nodes of any other package are
    located under `packages_path`. It defaults to the manifest's
    `metadata.project_name`.
    """
    nodes = _collect_nodes(manifest)
    if project_name is None:
        project_name = (manifest.get("metadata") or {}).get("project_name")

    parent_map = manifest.get("parent_map")
    child_map = manifest.get("child_map")
    if not isinstance(parent_map, dict) or not isinstance(child_map, dict):
        parent_map, child_map = _derive_maps(nodes)

    def keep(key: str) -> bool:
        return include_tests or not key.startswith(TEST_PREFIX)

    def refs(keys: List[str]) -> List[NeighborRef]:
        return [_neighbor(key, nodes.get(key), project_root, project_name, packages_path) for key in keys if keep(key)]

    all_keys = [k for k in {**parent_map, **child_map} if keep(k)]

    return GraphSnapshot.build(
        depends_on={key: refs(parent_map.get(key) or []) for key in all_keys},
        depended_on_by={key: refs(child_map.get(key) or []) for key in all_keys},
    )


def _collect_nodes(manifest: Dict[str, Any]) -> Dict[str, Dict[str, Any]]:
    nodes: Dict[str, Dict[str, Any]] = {}
    for section in NODE_SECTIONS:
        entries = manifest.get(section)
        if isinstance(entries, dict):
            nodes.update(entries)
    return nodes


def _derive_maps(nodes: Dict[str, Dict[str, Any]]) -> tuple[Dict[str, List[str]], Dict[str, List[str]]]:
    """Rebuild parent/child maps from each node's declared dependencies."""
    parent_map: Dict[str, List[str]] = {}
    child_map: Dict[str, List[str]] = defaultdict(list)

    for key, node in nodes.items():
        parents = (node.get("depends_on") or {}).get("nodes") or []
        parent_map[key] = list(parents)
        child_map.setdefault(key, [])
        for parent in parents:
            child_map[parent].append(key)

    return parent_map, dict(child_map)


def _neighbor(
    key: str,
    node: Optional[Dict[str, Any]],
    project_root: Path,
    project_name: Optional[str],
    packages_path: str,
) -> NeighborRef:
    url = node_url(node, project_root, project_name, packages_path)
    return NeighborRef(key=key, url=url, label=node_label(key, node))


def node_label(key: str, node: Optional[Dict[str, Any]]) -> str:
    """
    Display label of a node.

    Sources are shown as `source_name.table` since the bare table name is
    often shared across sources.
    """
    if not node:
        return key.split(".")[-1]
    if node.get("resource_type") == "source" and node.get("source_name"):
        return f"{node['source_name']}.{node.get('name', key.split('.')[-1])}"
    return node.get("name") or key.split(".")[-1]


def node_url(
    node: Optional[Dict[str, Any]],
    project_root: Path,
    project_name: Optional[str] = None,
    packages_path: str = DEFAULT_PACKAGES_PATH,
) -> str:
    """
    Absolute path of the file defining the node, or "" if unknown.

    `original_file_path` is relative to the package that defines the node, so
    nodes from installed packages live under `<packages_path>/<package_name>`.
    """
    if not node:
        return ""
    rel = node.get("original_file_path")
    if not rel:
        return ""
    package = node.get("package_name")
    if package and project_name and package != project_name:
        return str(project_root / packages_path / package / rel)
    return str(project_root / rel)

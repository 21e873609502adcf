"""
Node Resolver.

Maps the focused file onto its node in a project's graph. A dbt model file
`models/marts/orders.sql` corresponds to the key `model.<project>.orders`.
"""

import logging
from typing import List, Optional

from ..config import DEFAULT_NODE_KIND
from .context import ActiveFile
from .store import ProjectGraphStore
from .types import CurrentNode, GraphSnapshot

logger = logging.getLogger(__name__)


def find_node_key(
    snapshot: GraphSnapshot,
    base_name: str,
    node_kind: str = DEFAULT_NODE_KIND,
) -> Optional[str]:
    """
    Find the unique node key for a file base name.

    Candidates are the keys of the downstream view that start with
    `<node_kind>.` and end with `.<base_name>`. Two models with the same file
    name in different packages are ambiguous; that resolves to None rather
    than to an arbitrary one of them.
    """
    prefix = f"{node_kind}."
    suffix = f".{base_name}"
    matches: List[str] = [
        key for key in snapshot.depended_on_by
        if key.startswith(prefix) and key.endswith(suffix)
    ]

    if len(matches) == 1:
        return matches[0]

    if matches:
        logger.debug(f"Ambiguous node for '{base_name}': {sorted(matches)}")
    return None


def resolve_node(
    snapshot: GraphSnapshot,
    active_file: ActiveFile,
    node_kind: str = DEFAULT_NODE_KIND,
) -> Optional[CurrentNode]:
    """Resolve a file against a snapshot and count its immediate edges."""
    key = find_node_key(snapshot, active_file.base_name, node_kind)
    if key is None:
        return None

    upstream = snapshot.depends_on.get(key)
    downstream = snapshot.depended_on_by.get(key)
    return CurrentNode(
        table=key,
        url=active_file.url,
        upstream_count=len(upstream) if upstream is not None else 0,
        downstream_count=len(downstream) if downstream is not None else 0,
    )


class NodeResolver:
    """Resolves files against whichever snapshot the store currently holds."""

    def __init__(self, store: ProjectGraphStore, node_kind: str = DEFAULT_NODE_KIND):
        self.store = store
        self.node_kind = node_kind

    def resolve(
        self,
        project_id: Optional[str],
        active_file: Optional[ActiveFile],
    ) -> Optional[CurrentNode]:
        """
        Return the current node for a file in a project.

        Unknown project, missing file and unmatched names all yield None.
        """
        if project_id is None or active_file is None:
            return None

        snapshot = self.store.get(project_id)
        if snapshot is None:
            return None

        return resolve_node(snapshot, active_file, self.node_kind)

"""
lineage-lens - table-level lineage for dbt projects.

Keeps an in-memory graph of every dbt project in a workspace and answers the
two questions an editor lineage panel asks: which node is the focused file,
and which tables are directly upstream/downstream of a node.

Key Components:
- core: snapshots, the project store, node resolution and queries
- parsing: dbt manifest loading and project discovery
- gateway: the panel's request/response message channel
- session: the host wiring store, focus and channel together
- lsp: language server exposing the session to editors

Usage:
    from lineage_lens import LineageSession

    session = LineageSession(publish=print)
    session.feed.added("/work/jaffle_shop", snapshot)
    session.set_active_file("/work/jaffle_shop/models/orders.sql")
"""

__version__ = "0.1.0"

from .core.types import (
    ConnectedTable,
    CurrentNode,
    Direction,
    GraphSnapshot,
    NeighborRef,
    ProjectAdded,
    ProjectRemoved,
)
from .session import LineageSession

__all__ = [
    "__version__",
    "ConnectedTable",
    "CurrentNode",
    "Direction",
    "GraphSnapshot",
    "LineageSession",
    "NeighborRef",
    "ProjectAdded",
    "ProjectRemoved",
]

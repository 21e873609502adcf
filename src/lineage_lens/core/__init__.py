"""
Graph index core: snapshots, the project store, node resolution and
connected-tables queries.
"""

from .feed import UpdateFeed, parse_event
from .query import VIEW_FOR_DIRECTION, connected_tables
from .resolver import NodeResolver, find_node_key, resolve_node
from .store import ProjectGraphStore
from .types import (
    AdjacencyEntry,
    ConnectedTable,
    CurrentNode,
    Direction,
    GraphSnapshot,
    NeighborRef,
    ProjectAdded,
    ProjectRemoved,
)

__all__ = [
    "AdjacencyEntry",
    "ConnectedTable",
    "CurrentNode",
    "Direction",
    "GraphSnapshot",
    "NeighborRef",
    "NodeResolver",
    "ProjectAdded",
    "ProjectGraphStore",
    "ProjectRemoved",
    "UpdateFeed",
    "VIEW_FOR_DIRECTION",
    "connected_tables",
    "find_node_key",
    "parse_event",
    "resolve_node",
]

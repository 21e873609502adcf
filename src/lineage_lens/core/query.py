"""
Connected-Tables Query Engine.

Lists the immediate upstream or downstream tables of a node, one row per
distinct neighbor, each annotated with how many tables lie one step further
in the same direction.
"""

from functools import lru_cache
from typing import Dict, List, Tuple

from pyuca import Collator

from .types import AdjacencyView, ConnectedTable, Direction, GraphSnapshot

# The only place a query direction is tied to a stored view.
VIEW_FOR_DIRECTION: Dict[Direction, str] = {
    Direction.UPSTREAM: "depends_on",
    Direction.DOWNSTREAM: "depended_on_by",
}


def select_view(snapshot: GraphSnapshot, direction: Direction) -> AdjacencyView:
    """Return the adjacency view backing a query direction."""
    return getattr(snapshot, VIEW_FOR_DIRECTION[Direction(direction)])


def degree(view: AdjacencyView, key: str) -> int:
    """Number of neighbors recorded for `key` in `view` (0 if absent)."""
    entry = view.get(key)
    return len(entry) if entry is not None else 0


@lru_cache(maxsize=1)
def _collator() -> Collator:
    # Loads the DUCET table once per process
    return Collator()


def label_sort_key(label: str) -> Tuple[Tuple[int, ...], str]:
    """
    Collation key for panel labels.

    Uses the Unicode Collation Algorithm with the default table, the same
    ordering a browser's `localeCompare` applies: accents and case only break
    ties between otherwise equal labels, and punctuation sorts before digits,
    which sort before letters. The raw label keeps the order total.
    """
    return (_collator().sort_key(label), label)


def connected_tables(
    snapshot: GraphSnapshot,
    direction: Direction,
    node_key: str,
) -> List[ConnectedTable]:
    """
    Immediate neighbors of `node_key` in `direction`.

    Neighbors are deduplicated by key (the first occurrence wins; later
    duplicates are dropped without merging) and sorted by label. A node with
    no entry in the view has no neighbors. The returned rows are new objects
    and never alias the snapshot.
    """
    view = select_view(snapshot, direction)
    entry = view.get(node_key)
    if entry is None:
        return []

    tables: Dict[str, ConnectedTable] = {}
    for ref in entry.neighbors:
        if ref.key in tables:
            continue
        tables[ref.key] = ConnectedTable(
            table=ref.key,
            url=ref.url,
            label=ref.label,
            count=degree(view, ref.key),
        )

    return sorted(tables.values(), key=lambda t: label_sort_key(t.label))

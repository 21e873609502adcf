"""
Project Graph Store.

Holds the latest GraphSnapshot of every known dbt project, keyed by the
project's root directory. Updates replace or drop a whole snapshot; nothing
edits a snapshot in place.
"""

import logging
import threading
from typing import Dict, Iterable, List, Optional, Sequence

from .signals import Signal
from .types import GraphSnapshot, ProjectAdded, ProjectRemoved, UpdateEvent

logger = logging.getLogger(__name__)


class ProjectGraphStore:
    """
    Session-scoped mapping of project id -> GraphSnapshot.

    The mapping is copy-on-write: each update builds a new dict and swaps the
    reference under a lock, so a reader holding the old mapping (or an old
    snapshot) is never affected by a later update.

    Attributes:
        changed: Emits the list of applied events after every update.
    """

    def __init__(self):
        self._snapshots: Dict[str, GraphSnapshot] = {}
        self._lock = threading.Lock()
        self.changed: Signal[List[UpdateEvent]] = Signal("store.changed")

    def apply(self, event: UpdateEvent) -> None:
        """Apply a single added/removed event."""
        self.apply_all([event])

    def apply_all(self, events: Iterable[UpdateEvent]) -> None:
        """
        Apply a batch of events in order, then notify once.

        Later events for the same project win. Removing an unknown project
        is a no-op.
        """
        applied = list(events)
        if not applied:
            return

        with self._lock:
            snapshots = dict(self._snapshots)
            for event in applied:
                _apply_to(snapshots, event)
            self._snapshots = snapshots

        self.changed.emit(applied)

    def get(self, project_id: str) -> Optional[GraphSnapshot]:
        """Return the project's snapshot, or None if unknown."""
        return self._snapshots.get(project_id)

    def project_ids(self) -> Sequence[str]:
        return tuple(self._snapshots)

    def __contains__(self, project_id: str) -> bool:
        return project_id in self._snapshots

    def __len__(self) -> int:
        return len(self._snapshots)


def _apply_to(snapshots: Dict[str, GraphSnapshot], event: UpdateEvent) -> None:
    if isinstance(event, ProjectAdded):
        logger.info(
            f"Graph for {event.project_id} updated "
            f"({event.snapshot.node_count} nodes)"
        )
        snapshots[event.project_id] = event.snapshot
    elif isinstance(event, ProjectRemoved):
        if snapshots.pop(event.project_id, None) is not None:
            logger.info(f"Graph for {event.project_id} removed")

"""
Update Feed.

Entry point for graph updates coming from outside the core (manifest watcher,
language server, tests). Raw events are validated before they reach the
store; a malformed event is rejected and changes nothing.
"""

import logging
from typing import Any, Iterable, List

from pydantic import TypeAdapter, ValidationError

from .result import Err, Ok, Result
from .store import ProjectGraphStore
from .types import GraphSnapshot, ProjectAdded, ProjectRemoved, UpdateEvent

logger = logging.getLogger(__name__)

_EVENT_ADAPTER = TypeAdapter(UpdateEvent)


def parse_event(raw: Any) -> Result[UpdateEvent, str]:
    """
    Validate a raw event.

    Accepts typed events as-is, or dicts of the form
    `{"kind": "added", "project_id": ..., "snapshot": {...}}` /
    `{"kind": "removed", "project_id": ...}`.
    """
    if isinstance(raw, (ProjectAdded, ProjectRemoved)):
        return Ok(raw)

    try:
        return Ok(_EVENT_ADAPTER.validate_python(raw))
    except ValidationError as e:
        return Err(f"Malformed update event: {e.error_count()} error(s): {e.errors()[0]['msg']}")


class UpdateFeed:
    """Validates events and applies them to a store."""

    def __init__(self, store: ProjectGraphStore):
        self.store = store

    def submit(self, raw: Any) -> Result[UpdateEvent, str]:
        """Validate and apply one event."""
        result = parse_event(raw)
        if isinstance(result, Err):
            logger.warning(f"Rejected update: {result.error}")
            return result

        self.store.apply(result.value)
        return result

    def submit_batch(self, raws: Iterable[Any]) -> Result[List[UpdateEvent], str]:
        """
        Validate a batch and apply it atomically.

        If any event is malformed the whole batch is rejected.
        """
        events: List[UpdateEvent] = []
        for i, raw in enumerate(raws):
            result = parse_event(raw)
            if isinstance(result, Err):
                logger.warning(f"Rejected update batch at #{i}: {result.error}")
                return Err(f"event #{i}: {result.error}")
            events.append(result.value)

        self.store.apply_all(events)
        return Ok(events)

    def added(self, project_id: str, snapshot: GraphSnapshot) -> Result[UpdateEvent, str]:
        return self.submit({"kind": "added", "project_id": project_id, "snapshot": snapshot})

    def removed(self, project_id: str) -> Result[UpdateEvent, str]:
        return self.submit({"kind": "removed", "project_id": project_id})

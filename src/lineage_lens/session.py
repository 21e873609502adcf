"""
Lineage Session.

Hosts one editor session: owns the project store and the active context,
answers panel messages, and pushes a `render` message whenever the current
node may have changed (after every graph update and every focus change).
"""

import logging
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Union

from .config import LensConfig
from .core.context import ActiveContext
from .core.feed import UpdateFeed
from .core.resolver import NodeResolver
from .core.store import ProjectGraphStore
from .core.types import CurrentNode, UpdateEvent
from .gateway.handler import FileOpener, QueryGateway
from .gateway.messages import render_message

logger = logging.getLogger(__name__)

Publisher = Callable[[Dict[str, Any]], None]


class LineageSession:
    """
    Wires the core together for a single host.

    Args:
        publish: Sends a message to the panel (responses and renders).
        open_file: Opens a file in the editor for `openFile` messages.
        config: Workspace configuration.
        store: Existing store to share; a fresh one is created otherwise.
    """

    def __init__(
        self,
        publish: Publisher,
        open_file: Optional[FileOpener] = None,
        config: Optional[LensConfig] = None,
        store: Optional[ProjectGraphStore] = None,
    ):
        self.config = config or LensConfig()
        self.publish = publish
        self.store = store or ProjectGraphStore()
        self.feed = UpdateFeed(self.store)
        self.context = ActiveContext(self.store, self.config.model_extensions)
        self.resolver = NodeResolver(self.store, self.config.node_kind)
        self.gateway = QueryGateway(self.store, self.context, open_file)
        self._disconnect = self.store.changed.connect(self._on_store_changed)

    def current_node(self) -> Optional[CurrentNode]:
        """Node of the focused file in its project's latest graph."""
        return self.resolver.resolve(self.context.project_id(), self.context.active_file)

    def set_active_file(self, path: Union[str, Path, None]) -> None:
        """Focus moved to another file (or to none)."""
        self.context.set_active_file(path)
        self.render()

    def render(self) -> None:
        self.publish(render_message(self.current_node()))

    def handle_message(self, message: Any) -> None:
        """Process a panel message and publish the response, if any."""
        response = self.gateway.dispatch(message)
        if response is not None:
            self.publish(response)

    def close(self) -> None:
        self._disconnect()

    def _on_store_changed(self, events: List[UpdateEvent]) -> None:
        logger.debug(f"Store changed ({len(events)} event(s)), re-rendering")
        self.render()

"""
Minimal publish/subscribe primitive.

Used by the store to announce snapshot changes so the session can
re-derive the current node after every update.
"""

import logging
from typing import Callable, Generic, List, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

Listener = Callable[[T], None]


class Signal(Generic[T]):
    """
    Ordered registry of listeners.

    Listeners run synchronously in subscription order on the emitting thread.
    A failing listener is logged and does not prevent the others from running.
    """

    def __init__(self, name: str = "signal"):
        self.name = name
        self._listeners: List[Listener] = []

    def connect(self, listener: Listener) -> Callable[[], None]:
        """Subscribe a listener. Returns a callable that unsubscribes it."""
        self._listeners.append(listener)

        def disconnect() -> None:
            self.disconnect(listener)

        return disconnect

    def disconnect(self, listener: Listener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def emit(self, payload: T) -> None:
        for listener in list(self._listeners):
            try:
                listener(payload)
            except Exception as e:
                logger.error(f"Listener for '{self.name}' failed: {e}", exc_info=True)

    def __len__(self) -> int:
        return len(self._listeners)

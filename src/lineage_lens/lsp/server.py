"""
LSP Server implementation for lineage-lens.

This server acts as the bridge between the editor's lineage panel and the
graph index. The panel's message channel is carried over two custom
notifications, both named `lineage/message`:

- client -> server: `request` and `openFile` messages from the panel.
- server -> client: `response` messages and `render` pushes.

The client reports focus changes with `lineage/activeEditor` ({"uri": ...}).
"""

import asyncio
import logging
from typing import Any, Optional

from lsprotocol.types import (
    INITIALIZE,
    SHUTDOWN,
    TEXT_DOCUMENT_DID_OPEN,
    DidOpenTextDocumentParams,
    InitializeParams,
    ShowDocumentParams,
)
from pygls.lsp.server import LanguageServer

from ..config import LensConfig
from ..session import LineageSession
from ..watcher import ManifestWatcher
from .utils import path_to_uri, uri_to_path

# Setup basic logging configuration
logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(message)s")
logger = logging.getLogger("lineage-lens")

LINEAGE_MESSAGE = "lineage/message"
LINEAGE_ACTIVE_EDITOR = "lineage/activeEditor"

server = LanguageServer("lineage-lens", "v0.1.0")

# Global state
session: Optional[LineageSession] = None
watcher: Optional[ManifestWatcher] = None


def _plain(value: Any) -> Any:
    """Convert pygls' structured params of custom methods back to plain data."""
    if isinstance(value, dict):
        return {k: _plain(v) for k, v in value.items()}
    if hasattr(value, "_asdict"):
        return _plain(value._asdict())
    if isinstance(value, (list, tuple)):
        return [_plain(v) for v in value]
    return value


def _make_dispatcher():
    """Run store updates from the watcher thread on the server's event loop."""
    try:
        loop = asyncio.get_running_loop()
    except RuntimeError:
        return None
    return lambda fn: loop.call_soon_threadsafe(fn)


def create_session(ls: LanguageServer, config: LensConfig) -> LineageSession:
    """Build a session whose channel is the client connection."""

    def publish(message: dict) -> None:
        ls.protocol.notify(LINEAGE_MESSAGE, message)

    def open_file(url: str) -> None:
        ls.window_show_document(
            ShowDocumentParams(uri=path_to_uri(url), take_focus=False)
        )

    return LineageSession(publish=publish, open_file=open_file, config=config)


@server.feature(INITIALIZE)
def initialize(ls: LanguageServer, params: InitializeParams):
    """
    Handle the initialization request from the client.
    Creates the session and starts watching the workspace's dbt manifests.
    """
    global session, watcher

    root_uri = params.root_uri or params.root_path
    if not root_uri:
        logger.warning("No root URI provided. Lineage unavailable.")
        return

    root_path = uri_to_path(root_uri)
    logger.info(f"Initializing lineage-lens for root: {root_path}")

    config = LensConfig.load(root_path)
    session = create_session(ls, config)

    watcher = ManifestWatcher(root_path, session.feed, config, dispatch=_make_dispatcher())
    watcher.start()

    logger.info("LSP Initialization complete.")


@server.feature(SHUTDOWN)
def shutdown(ls: LanguageServer, params):
    """Handle the shutdown request."""
    global session, watcher
    if watcher:
        watcher.stop()
        watcher = None
    if session:
        session.close()
        session = None


@server.feature(TEXT_DOCUMENT_DID_OPEN)
def did_open(ls: LanguageServer, params: DidOpenTextDocumentParams):
    """A newly opened document becomes the focused file."""
    _focus(params.text_document.uri)


@server.feature(LINEAGE_ACTIVE_EDITOR)
def active_editor(ls: LanguageServer, params: Any):
    """The client switched editors. A null uri means no editor is focused."""
    uri = _plain(params).get("uri") if params is not None else None
    _focus(uri)


@server.feature(LINEAGE_MESSAGE)
def lineage_message(ls: LanguageServer, params: Any):
    """A message from the lineage panel."""
    if not session:
        logger.warning("Lineage message received before initialization")
        return
    session.handle_message(_plain(params))


def _focus(uri: Optional[str]) -> None:
    if not session:
        return

    if not uri:
        session.set_active_file(None)
        return

    try:
        path = uri_to_path(uri)
    except ValueError as e:
        logger.debug(f"Not a local file ({e}); clearing focus")
        session.set_active_file(None)
        return

    session.set_active_file(path)


def main():
    """Entry point for the LSP server."""
    server.start_io()


if __name__ == "__main__":
    main()

"""
Query Gateway.

Thin relay between the lineage panel's message channel and the graph core.
It answers table requests for the project owning the focused file and
forwards "open this file" requests to the host.
"""

import logging
from typing import Any, Callable, Dict, List, Optional

from ..core.context import ActiveContext
from ..core.query import connected_tables
from ..core.result import Err
from ..core.store import ProjectGraphStore
from ..core.types import Direction
from .messages import (
    REQUEST_DIRECTIONS,
    parse_request_args,
    parse_tables_params,
    recover_request_id,
    response_message,
)

logger = logging.getLogger(__name__)

FileOpener = Callable[[str], None]


def _log_open_file(url: str) -> None:
    logger.info(f"Open requested for {url} (no file opener configured)")


class QueryGateway:
    """
    Routes panel messages to the core.

    Args:
        store: Store to read snapshots from.
        context: Active editor context selecting the project.
        open_file: Host callback for `openFile` messages.
    """

    def __init__(
        self,
        store: ProjectGraphStore,
        context: ActiveContext,
        open_file: Optional[FileOpener] = None,
    ):
        self.store = store
        self.context = context
        self.open_file = open_file or _log_open_file

    def dispatch(self, message: Any) -> Optional[Dict[str, Any]]:
        """
        Handle one channel message.

        Returns the response message for `request` commands, None otherwise.
        """
        if not isinstance(message, dict):
            logger.warning(f"Ignoring non-object message: {message!r}")
            return None

        command = message.get("command")
        if command == "request":
            return self.handle_request(message.get("args"))

        if command == "openFile":
            url = message.get("url")
            if url and isinstance(url, str):
                self.open_file(url)
            return None

        logger.warning(f"Ignoring unknown command: {command!r}")
        return None

    def handle_request(self, raw_args: Any) -> Optional[Dict[str, Any]]:
        """
        Answer a `request` message.

        Unknown urls are acknowledged without a body. Malformed requests are
        answered with status False; those without a usable id are dropped.
        """
        parsed = parse_request_args(raw_args)
        if isinstance(parsed, Err):
            return self._reject(raw_args, parsed.error)

        args = parsed.value
        direction = REQUEST_DIRECTIONS.get(args.url)
        if direction is None:
            logger.debug(f"No handler for request url {args.url!r}")
            return response_message(args.id, True, None)

        params = parse_tables_params(args.params)
        if isinstance(params, Err):
            return self._reject(raw_args, params.error)

        tables = self.get_tables(direction, params.value.table)
        return response_message(args.id, True, {"tables": tables})

    def get_tables(self, direction: Direction, table: str) -> Optional[List[Dict[str, Any]]]:
        """
        Connected tables of `table` in the active project.

        Returns None when there is no active project or it has no graph yet.
        """
        project_id = self.context.project_id()
        if project_id is None:
            return None

        snapshot = self.store.get(project_id)
        if snapshot is None:
            return None

        return [row.model_dump() for row in connected_tables(snapshot, direction, table)]

    def _reject(self, raw_args: Any, reason: str) -> Optional[Dict[str, Any]]:
        request_id = recover_request_id(raw_args)
        logger.warning(f"Rejected request (id={request_id}): {reason}")
        if request_id is None:
            return None
        return response_message(request_id, False, None)

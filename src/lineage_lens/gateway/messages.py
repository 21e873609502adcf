"""
Message shapes exchanged with the lineage panel.

Requests:
    {"command": "request", "args": {"url": "upstreamTables", "id": 1, "params": {"table": "model.p.orders"}}}
    {"command": "openFile", "url": "/abs/path/models/orders.sql"}

Responses and pushes:
    {"command": "response", "args": {"id": 1, "status": true, "body": {"tables": [...]}}}
    {"command": "render", "args": {"node": {"table": ..., "url": ..., "upstreamCount": 1, "downstreamCount": 2}}}
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, StrictInt, StrictStr, ValidationError

from ..core.result import Err, Ok, Result
from ..core.types import CurrentNode, Direction

UPSTREAM_TABLES = "upstreamTables"
DOWNSTREAM_TABLES = "downstreamTables"

REQUEST_DIRECTIONS: Dict[str, Direction] = {
    UPSTREAM_TABLES: Direction.UPSTREAM,
    DOWNSTREAM_TABLES: Direction.DOWNSTREAM,
}


class RequestArgs(BaseModel):
    """Envelope of a `request` message. `params` depends on the url."""
    url: StrictStr
    id: StrictInt
    params: Any = None

    model_config = ConfigDict(extra="ignore")


class TablesParams(BaseModel):
    """Parameters of the upstreamTables/downstreamTables requests."""
    table: StrictStr

    model_config = ConfigDict(extra="ignore")


def _first_error(e: ValidationError) -> str:
    err = e.errors()[0]
    location = ".".join(str(part) for part in err["loc"]) or "<root>"
    return f"{location}: {err['msg']}"


def parse_request_args(raw: Any) -> Result[RequestArgs, str]:
    try:
        return Ok(RequestArgs.model_validate(raw))
    except ValidationError as e:
        return Err(_first_error(e))


def parse_tables_params(raw: Any) -> Result[TablesParams, str]:
    try:
        return Ok(TablesParams.model_validate(raw))
    except ValidationError as e:
        return Err(f"params.{_first_error(e)}")


def recover_request_id(raw: Any) -> Optional[int]:
    """Best-effort id of a malformed request so it can still be answered."""
    if isinstance(raw, dict):
        request_id = raw.get("id")
        if isinstance(request_id, int) and not isinstance(request_id, bool):
            return request_id
    return None


def response_message(request_id: int, status: bool, body: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    return {
        "command": "response",
        "args": {"id": request_id, "status": status, "body": body},
    }


def render_message(node: Optional[CurrentNode]) -> Dict[str, Any]:
    """A `render` push. Without a current node, `args` carries no `node` key."""
    args: Dict[str, Any] = {}
    if node is not None:
        args["node"] = node.to_message()
    return {"command": "render", "args": args}

"""Message-channel adapter between the lineage panel and the graph core."""

from .handler import QueryGateway
from .messages import (
    DOWNSTREAM_TABLES,
    REQUEST_DIRECTIONS,
    UPSTREAM_TABLES,
    render_message,
    response_message,
)

__all__ = [
    "DOWNSTREAM_TABLES",
    "QueryGateway",
    "REQUEST_DIRECTIONS",
    "UPSTREAM_TABLES",
    "render_message",
    "response_message",
]

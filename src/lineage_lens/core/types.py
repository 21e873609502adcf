"""
Core type definitions for lineage-lens.

A GraphSnapshot is one dbt project's table-level graph, held as two adjacency
views keyed by node key (e.g. "model.jaffle_shop.orders"):

- depends_on: for a node, the nodes it reads from (its upstream tables).
- depended_on_by: for a node, the nodes that read from it (its downstream tables).

Snapshots are frozen after construction and replaced wholesale on update.
"""

from enum import StrEnum
from types import MappingProxyType
from typing import Annotated, Dict, Iterable, Literal, Mapping, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class Direction(StrEnum):
    """Traversal direction of a connected-tables query."""
    UPSTREAM = "upstream"
    DOWNSTREAM = "downstream"


class NeighborRef(BaseModel):
    """
    One endpoint of a directed edge.

    Attributes:
        key: Node key of the neighbor.
        url: Locator used to open the neighbor (usually its file path).
        label: Human-readable name shown in the panel.
    """
    key: str
    url: str = ""
    label: str

    model_config = ConfigDict(frozen=True)


class AdjacencyEntry(BaseModel):
    """Immediate neighbors of one node in one direction, in manifest order."""
    neighbors: Tuple[NeighborRef, ...] = ()

    model_config = ConfigDict(frozen=True)

    def __len__(self) -> int:
        return len(self.neighbors)


AdjacencyView = Mapping[str, AdjacencyEntry]


class GraphSnapshot(BaseModel):
    """
    Complete graph of a single project at a point in time.

    A key missing from a view means the node has no recorded edges in that
    direction, which is normal for sources (no upstream) and leaf models
    (no downstream).
    """
    depends_on: AdjacencyView = Field(default_factory=dict, validate_default=True)
    depended_on_by: AdjacencyView = Field(default_factory=dict, validate_default=True)

    model_config = ConfigDict(frozen=True)

    @field_validator("depends_on", "depended_on_by", mode="after")
    @classmethod
    def freeze_view(cls, view: Mapping[str, AdjacencyEntry]) -> AdjacencyView:
        # Own copy behind a read-only proxy: nobody can edit a stored view
        return MappingProxyType(dict(view))

    @classmethod
    def build(
        cls,
        depends_on: Mapping[str, Iterable[NeighborRef]] | None = None,
        depended_on_by: Mapping[str, Iterable[NeighborRef]] | None = None,
    ) -> "GraphSnapshot":
        """Create a snapshot from plain `key -> neighbors` mappings."""
        return cls(
            depends_on={
                key: AdjacencyEntry(neighbors=tuple(refs))
                for key, refs in (depends_on or {}).items()
            },
            depended_on_by={
                key: AdjacencyEntry(neighbors=tuple(refs))
                for key, refs in (depended_on_by or {}).items()
            },
        )

    @property
    def node_count(self) -> int:
        return len(set(self.depends_on) | set(self.depended_on_by))


class ConnectedTable(BaseModel):
    """
    A row of a connected-tables query.

    `count` is the neighbor's own number of edges in the queried direction,
    so the panel can show whether it can be expanded further.
    """
    table: str
    url: str
    label: str
    count: int


class CurrentNode(BaseModel):
    """Graph node matching the focused file, with its immediate degrees."""
    table: str
    url: str
    upstream_count: int
    downstream_count: int

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_message(self) -> Dict[str, object]:
        return self.model_dump(by_alias=True)


class ProjectAdded(BaseModel):
    """A project's snapshot was built or rebuilt."""
    kind: Literal["added"] = "added"
    project_id: str = Field(min_length=1)
    snapshot: GraphSnapshot

    model_config = ConfigDict(frozen=True)


class ProjectRemoved(BaseModel):
    """A project went away (manifest deleted, folder closed)."""
    kind: Literal["removed"] = "removed"
    project_id: str = Field(min_length=1)

    model_config = ConfigDict(frozen=True)


UpdateEvent = Annotated[Union[ProjectAdded, ProjectRemoved], Field(discriminator="kind")]

"""Unit tests for resolving the focused file to a graph node."""

from pathlib import Path

from lineage_lens.core.context import ActiveFile
from lineage_lens.core.resolver import NodeResolver, find_node_key, resolve_node
from lineage_lens.core.store import ProjectGraphStore
from lineage_lens.core.types import GraphSnapshot, ProjectAdded

from graph_fixtures import CUSTOMERS, ORDERS, STG_CUSTOMERS, ref


class TestFindNodeKey:
    def test_matches_model_by_suffix(self):
        snapshot = GraphSnapshot.build(depended_on_by={"model.proj.orders": [ref("model.proj.x")]})

        assert find_node_key(snapshot, "orders") == "model.proj.orders"

    def test_missing_name(self):
        snapshot = GraphSnapshot.build(depended_on_by={"model.proj.orders": []})

        assert find_node_key(snapshot, "missing") is None

    def test_requires_model_prefix(self):
        snapshot = GraphSnapshot.build(
            depended_on_by={"seed.proj.orders": [], "snapshot.proj.orders": []}
        )

        assert find_node_key(snapshot, "orders") is None

    def test_requires_full_name_segment(self):
        """'orders' must not match 'model.proj.stg_orders'."""
        snapshot = GraphSnapshot.build(depended_on_by={"model.proj.stg_orders": []})

        assert find_node_key(snapshot, "orders") is None

    def test_ambiguous_name_is_no_match(self):
        snapshot = GraphSnapshot.build(
            depended_on_by={"model.proj.orders": [], "model.other_pkg.orders": []}
        )

        assert find_node_key(snapshot, "orders") is None

    def test_only_downstream_view_is_searched(self):
        snapshot = GraphSnapshot.build(depends_on={"model.proj.orders": []})

        assert find_node_key(snapshot, "orders") is None

    def test_custom_node_kind(self):
        snapshot = GraphSnapshot.build(depended_on_by={"seed.proj.countries": []})

        assert find_node_key(snapshot, "countries", node_kind="seed") == "seed.proj.countries"


class TestResolveNode:
    def test_counts(self, jaffle_snapshot):
        active = ActiveFile.from_path("/work/jaffle/models/marts/orders.sql")

        node = resolve_node(jaffle_snapshot, active)

        assert node.table == ORDERS
        assert node.url == "/work/jaffle/models/marts/orders.sql"
        assert node.upstream_count == 2
        assert node.downstream_count == 1

    def test_downstream_only_node(self):
        snapshot = GraphSnapshot.build(depended_on_by={"model.p.leaf": [ref("model.p.x"), ref("model.p.y")]})

        node = resolve_node(snapshot, ActiveFile.from_path("/p/leaf.sql"))

        assert node.upstream_count == 0
        assert node.downstream_count == 2

    def test_leaf_model(self, jaffle_snapshot):
        node = resolve_node(jaffle_snapshot, ActiveFile.from_path("/p/customers.sql"))

        assert node.table == CUSTOMERS
        assert node.downstream_count == 0

    def test_non_model_file(self, jaffle_snapshot):
        assert resolve_node(jaffle_snapshot, ActiveFile.from_path("/p/schema.yml")) is None

    def test_serialization(self, jaffle_snapshot):
        node = resolve_node(jaffle_snapshot, ActiveFile.from_path("/p/stg_customers.sql"))

        assert node.to_message() == {
            "table": STG_CUSTOMERS,
            "url": "/p/stg_customers.sql",
            "upstreamCount": 1,
            "downstreamCount": 2,
        }


class TestNodeResolver:
    def test_resolves_through_store(self, jaffle_snapshot):
        store = ProjectGraphStore()
        store.apply(ProjectAdded(project_id="/work/jaffle", snapshot=jaffle_snapshot))
        resolver = NodeResolver(store)

        node = resolver.resolve("/work/jaffle", ActiveFile.from_path(Path("/work/jaffle/models/orders.sql")))

        assert node.table == ORDERS

    def test_unknown_project(self, jaffle_snapshot):
        resolver = NodeResolver(ProjectGraphStore())

        assert resolver.resolve("/work/jaffle", ActiveFile.from_path("/work/jaffle/orders.sql")) is None

    def test_no_project_or_file(self):
        resolver = NodeResolver(ProjectGraphStore())

        assert resolver.resolve(None, ActiveFile.from_path("/x/orders.sql")) is None
        assert resolver.resolve("/x", None) is None

    def test_follows_replacement(self, jaffle_snapshot):
        store = ProjectGraphStore()
        resolver = NodeResolver(store)
        active = ActiveFile.from_path("/work/jaffle/orders.sql")

        store.apply(ProjectAdded(project_id="/work/jaffle", snapshot=jaffle_snapshot))
        assert resolver.resolve("/work/jaffle", active).upstream_count == 2

        store.apply(ProjectAdded(project_id="/work/jaffle", snapshot=GraphSnapshot()))
        assert resolver.resolve("/work/jaffle", active) is None

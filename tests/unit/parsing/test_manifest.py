"""Unit tests for building snapshots from dbt manifests."""

import json
from pathlib import Path

import pytest

from lineage_lens.config import LensConfig
from lineage_lens.core.result import Err, Ok
from lineage_lens.parsing.manifest import build_snapshot, load_snapshot, node_label, node_url

from graph_fixtures import (
    CUSTOMERS,
    NOT_NULL_TEST,
    ORDERS,
    PROJECT,
    RAW_ORDERS,
    STG_CUSTOMERS,
    STG_ORDERS,
    manifest_document,
)

ROOT = Path("/work/jaffle")
UTIL_SPINE = "model.dbt_utils.date_spine"


def keys(entry):
    return [n.key for n in entry.neighbors]


class TestBuildSnapshot:
    def test_parent_map_feeds_depends_on(self):
        snapshot = build_snapshot(manifest_document(), ROOT)

        assert keys(snapshot.depends_on[ORDERS]) == [STG_ORDERS, STG_CUSTOMERS]
        assert keys(snapshot.depends_on[RAW_ORDERS]) == []

    def test_child_map_feeds_depended_on_by(self):
        snapshot = build_snapshot(manifest_document(), ROOT)

        assert keys(snapshot.depended_on_by[STG_CUSTOMERS]) == [ORDERS, CUSTOMERS]
        assert keys(snapshot.depended_on_by[CUSTOMERS]) == []

    def test_tests_excluded_by_default(self):
        snapshot = build_snapshot(manifest_document(), ROOT)

        assert NOT_NULL_TEST not in snapshot.depends_on
        assert NOT_NULL_TEST not in snapshot.depended_on_by
        assert keys(snapshot.depended_on_by[ORDERS]) == [CUSTOMERS]

    def test_tests_included_on_request(self):
        snapshot = build_snapshot(manifest_document(), ROOT, include_tests=True)

        assert keys(snapshot.depended_on_by[ORDERS]) == [CUSTOMERS, NOT_NULL_TEST]
        assert keys(snapshot.depends_on[NOT_NULL_TEST]) == [ORDERS]

    def test_every_key_in_both_views(self):
        snapshot = build_snapshot(manifest_document(), ROOT)

        assert set(snapshot.depends_on) == set(snapshot.depended_on_by)
        assert snapshot.node_count == 6

    def test_neighbor_details(self):
        snapshot = build_snapshot(manifest_document(), ROOT)

        stg = snapshot.depended_on_by[RAW_ORDERS].neighbors[0]
        assert stg.label == "stg_orders"
        assert stg.url == str(ROOT / "models/staging/stg_orders.sql")

        raw = snapshot.depends_on[STG_ORDERS].neighbors[0]
        assert raw.label == "raw.orders"

    def test_derives_maps_when_missing(self):
        document = manifest_document()
        del document["parent_map"]
        del document["child_map"]

        snapshot = build_snapshot(document, ROOT)

        assert keys(snapshot.depends_on[ORDERS]) == [STG_ORDERS, STG_CUSTOMERS]
        assert keys(snapshot.depended_on_by[STG_CUSTOMERS]) == [ORDERS, CUSTOMERS]
        assert keys(snapshot.depended_on_by[RAW_ORDERS]) == [STG_ORDERS]

    def test_empty_manifest(self):
        snapshot = build_snapshot({}, ROOT)

        assert snapshot.node_count == 0

    def test_project_name_from_metadata(self):
        document = manifest_document()
        document["metadata"]["project_name"] = PROJECT
        document["nodes"][STG_ORDERS]["package_name"] = "other"

        snapshot = build_snapshot(document, ROOT)

        stg = snapshot.depended_on_by[RAW_ORDERS].neighbors[0]
        assert stg.url == str(ROOT / "dbt_packages/other/models/staging/stg_orders.sql")


class TestLabelsAndUrls:
    def test_model_label(self):
        assert node_label(ORDERS, {"resource_type": "model", "name": "orders"}) == "orders"

    def test_source_label(self):
        node = {"resource_type": "source", "source_name": "raw", "name": "orders"}
        assert node_label(RAW_ORDERS, node) == "raw.orders"

    def test_unknown_node_label(self):
        assert node_label("model.other.thing", None) == "thing"

    def test_url(self):
        assert node_url({"original_file_path": "models/a.sql"}, ROOT) == str(ROOT / "models/a.sql")

    def test_package_node_url(self):
        node = {"package_name": "dbt_utils", "original_file_path": "macros/date_spine.sql"}

        assert node_url(node, ROOT, "jaffle") == str(ROOT / "dbt_packages/dbt_utils/macros/date_spine.sql")
        assert node_url(node, ROOT, "jaffle", "vendor") == str(ROOT / "vendor/dbt_utils/macros/date_spine.sql")

    def test_root_package_node_url(self):
        node = {"package_name": "jaffle", "original_file_path": "models/a.sql"}

        assert node_url(node, ROOT, "jaffle") == str(ROOT / "models/a.sql")

    @pytest.mark.parametrize("node", [None, {}, {"original_file_path": ""}])
    def test_missing_url(self, node):
        assert node_url(node, ROOT) == ""


class TestLoadSnapshot:
    def test_loads_project(self, dbt_project):
        result = load_snapshot(dbt_project)

        assert isinstance(result, Ok)
        snapshot = result.value
        assert keys(snapshot.depends_on[ORDERS]) == [STG_ORDERS, STG_CUSTOMERS]
        assert snapshot.depends_on[ORDERS].neighbors[0].url == str(
            dbt_project / "models/staging/stg_orders.sql"
        )

    def test_missing_manifest(self, tmp_path):
        result = load_snapshot(tmp_path)

        assert isinstance(result, Err)
        assert "dbt parse" in result.error

    def test_invalid_json(self, dbt_project):
        (dbt_project / "target" / "manifest.json").write_text("{not json")

        result = load_snapshot(dbt_project)

        assert isinstance(result, Err)
        assert "Invalid JSON" in result.error

    def test_non_object_document(self, dbt_project):
        (dbt_project / "target" / "manifest.json").write_text(json.dumps([1, 2]))

        assert isinstance(load_snapshot(dbt_project), Err)

    def test_custom_target_path(self, dbt_project):
        (dbt_project / "target").rename(dbt_project / "build")

        assert isinstance(load_snapshot(dbt_project), Err)

        result = load_snapshot(dbt_project, LensConfig(target_path="build"))
        assert isinstance(result, Ok)

    def test_package_nodes_resolve_under_packages_dir(self, dbt_project):
        document = manifest_document()
        document["nodes"][ORDERS]["package_name"] = PROJECT
        document["nodes"][UTIL_SPINE] = {
            "resource_type": "model",
            "package_name": "dbt_utils",
            "name": "date_spine",
            "original_file_path": "models/date_spine.sql",
        }
        document["parent_map"][UTIL_SPINE] = []
        document["child_map"][UTIL_SPINE] = [ORDERS]
        document["parent_map"][ORDERS].append(UTIL_SPINE)
        (dbt_project / "target" / "manifest.json").write_text(json.dumps(document))

        snapshot = load_snapshot(dbt_project).value

        urls = {n.key: n.url for n in snapshot.depends_on[ORDERS].neighbors}
        assert urls[UTIL_SPINE] == str(dbt_project / "dbt_packages/dbt_utils/models/date_spine.sql")
        assert urls[STG_ORDERS] == str(dbt_project / "models/staging/stg_orders.sql")
        orders = snapshot.depended_on_by[UTIL_SPINE].neighbors[0]
        assert orders.url == str(dbt_project / "models/marts/orders.sql")

    def test_include_tests_from_config(self, dbt_project):
        result = load_snapshot(dbt_project, LensConfig(include_tests=True))

        assert NOT_NULL_TEST in result.value.depends_on

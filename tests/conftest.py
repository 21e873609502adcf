"""Shared fixtures: a small jaffle_shop style graph and an on-disk dbt project."""

import json
from pathlib import Path

import pytest

from lineage_lens.core.types import GraphSnapshot

from graph_fixtures import PROJECT, jaffle_graph, manifest_document

MODEL_FILES = (
    "models/staging/stg_orders.sql",
    "models/staging/stg_customers.sql",
    "models/marts/orders.sql",
    "models/marts/customers.sql",
)


@pytest.fixture
def jaffle_snapshot() -> GraphSnapshot:
    return jaffle_graph()


@pytest.fixture
def dbt_project(tmp_path: Path) -> Path:
    """A dbt project on disk with a compiled manifest and model files."""
    root = tmp_path / "jaffle_shop"
    (root / "models" / "staging").mkdir(parents=True)
    (root / "models" / "marts").mkdir(parents=True)
    (root / "target").mkdir()

    (root / "dbt_project.yml").write_text(f"name: {PROJECT}\n")
    for rel in MODEL_FILES:
        (root / rel).write_text("select 1\n")

    (root / "target" / "manifest.json").write_text(json.dumps(manifest_document()))
    return root.resolve()

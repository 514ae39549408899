from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from asset_graph.api import create_app
from asset_graph.graph import GraphService, SQLiteGraphStore
from asset_graph.settings import AssetGraphSettings


@pytest.fixture
def store(tmp_path):
    s = SQLiteGraphStore(tmp_path / "graph.db")
    s.ensure_schema()
    yield s
    s.close()


@pytest.fixture
def graph(store) -> GraphService:
    return GraphService.build(store)


@pytest.fixture
def clientes(graph):
    """A `Clientes` class, present before every graph test that asks for it."""
    return graph.classes.define("Clientes", {"nome": "string", "idade": "int"})


@pytest.fixture
def client(store):
    app = create_app(store, app_settings=AssetGraphSettings(api_key=None, cors_origins=["*"]))
    return TestClient(app)

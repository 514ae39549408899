import sqlite3

import pytest

from asset_graph.graph import (
    ClassDef,
    Conflict,
    Edge,
    EdgeCriteria,
    InvalidArgument,
    Node,
    SQLiteGraphStore,
    StorageError,
)


def _seed(store):
    store.insert_class(ClassDef("Clientes", {"nome": "string"}))
    store.insert_node(Node("A", "Clientes", {"nome": "A"}))
    store.insert_node(Node("B", "Clientes", {"nome": "B"}))
    store.insert_node(Node("C", "Clientes", {}))


def test_in_memory_store_is_isolated():
    a = SQLiteGraphStore()
    b = SQLiteGraphStore()
    a.ensure_schema()
    b.ensure_schema()
    a.insert_class(ClassDef("X"))
    assert [c.identifier for c in a.list_classes()] == ["X"]
    assert b.list_classes() == []


def test_attributes_round_trip_keeps_order_and_nesting(store):
    attrs = {"z": 1, "a": {"nested": [1, "dois", True]}, "m": None, "nome": "João"}
    store.insert_class(ClassDef("Clientes", attrs))
    got = store.get_class("Clientes")
    assert got.attributes == attrs
    assert list(got.attributes) == ["z", "a", "m", "nome"]


def test_classes_listed_in_insertion_order(store):
    for name in ["b", "a", "c"]:
        store.insert_class(ClassDef(name))
    assert [c.identifier for c in store.list_classes()] == ["b", "a", "c"]


def test_duplicate_primary_key_is_conflict(store):
    store.insert_class(ClassDef("Clientes"))
    with pytest.raises(Conflict):
        store.insert_class(ClassDef("Clientes"))


def test_foreign_keys_are_enforced(store):
    with pytest.raises(StorageError):
        store.insert_node(Node("orphan", "Missing", {}))


def test_node_with_edges_cannot_be_deleted_directly(store):
    _seed(store)
    store.insert_edge(Edge("A", "B", "Relacionado"))
    with pytest.raises(StorageError):
        store.delete_nodes(["A"])
    assert store.get_node("A") is not None


def test_duplicate_edges_are_allowed(store):
    _seed(store)
    store.insert_edge(Edge("A", "B", "Relacionado"))
    store.insert_edge(Edge("A", "B", "Relacionado"))
    assert len(store.find_edges(EdgeCriteria(source_id="A"))) == 2


def test_edges_touching_matches_either_endpoint(store):
    _seed(store)
    store.insert_edge(Edge("A", "B", "x"))
    store.insert_edge(Edge("C", "A", "y"))
    store.insert_edge(Edge("B", "C", "z"))
    assert {e.type for e in store.edges_touching(["A"])} == {"x", "y"}
    assert store.edges_touching([]) == []


def test_criteria_only_constrain_supplied_fields(store):
    _seed(store)
    store.insert_edge(Edge("A", "B", "x"))
    store.insert_edge(Edge("A", "C", "y"))
    store.insert_edge(Edge("B", "C", "x"))
    assert len(store.find_edges(EdgeCriteria(type="x"))) == 2
    assert len(store.find_edges(EdgeCriteria(source_id="A", type="x"))) == 1
    assert store.delete_edges(EdgeCriteria(destination_id="C")) == 2
    with pytest.raises(ValueError):
        store.find_edges(EdgeCriteria())


def test_transaction_rolls_back_on_error(store):
    _seed(store)
    with pytest.raises(RuntimeError):
        with store.transaction():
            store.insert_node(Node("D", "Clientes", {}))
            raise RuntimeError("boom")
    assert store.get_node("D") is None


def test_nested_transaction_commits_once_at_outermost(store):
    _seed(store)
    with store.transaction():
        with store.transaction():
            store.insert_node(Node("D", "Clientes", {}))
        store.insert_node(Node("E", "Clientes", {}))
    assert store.get_node("D") is not None
    assert store.get_node("E") is not None


def test_update_node_attributes_reports_rowcount(store):
    _seed(store)
    assert store.update_node_attributes("A", {"novo": 1}) == 1
    assert store.update_node_attributes("missing", {}) == 0
    assert store.get_node("A").attributes == {"novo": 1}


def test_nan_attributes_are_rejected_without_writing(store):
    with pytest.raises(InvalidArgument):
        store.insert_class(ClassDef("Clientes", {"x": float("nan")}))
    assert store.list_classes() == []


def test_locked_database_is_a_storage_error(store):
    other = SQLiteGraphStore(store.path, timeout=0)
    try:
        with store.transaction():
            store.insert_class(ClassDef("Clientes"))
            with pytest.raises(StorageError, match="locked"):
                other.insert_class(ClassDef("Produtos"))

        other.insert_class(ClassDef("Produtos"))
        assert [c.identifier for c in other.list_classes()] == ["Clientes", "Produtos"]
    finally:
        other.close()


class _CommitFailsOnce:
    def __init__(self, conn):
        self._conn = conn
        self.failed = False

    def execute(self, sql, *args):
        if sql == "COMMIT" and not self.failed:
            self.failed = True
            raise sqlite3.OperationalError("disk I/O error")
        return self._conn.execute(sql, *args)

    @property
    def in_transaction(self):
        return self._conn.in_transaction

    def __getattr__(self, name):
        return getattr(self._conn, name)


def test_failed_commit_rolls_back_and_store_stays_usable(store, monkeypatch):
    monkeypatch.setattr(store, "conn", _CommitFailsOnce(store.conn))

    with pytest.raises(StorageError, match="disk I/O"):
        store.insert_class(ClassDef("Clientes"))

    assert store.get_class("Clientes") is None
    store.insert_class(ClassDef("Clientes"))
    assert [c.identifier for c in store.list_classes()] == ["Clientes"]

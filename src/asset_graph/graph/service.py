from __future__ import annotations

from dataclasses import dataclass

from .classes import ClassRegistry
from .edges import EdgeStore
from .engine import ConsistencyEngine
from .nodes import NodeStore
from .store import GraphStore


@dataclass(slots=True)
class GraphService:
    """Class registry, node store and edge store sharing one engine and store."""

    store: GraphStore
    engine: ConsistencyEngine
    classes: ClassRegistry
    nodes: NodeStore
    edges: EdgeStore

    @classmethod
    def build(cls, store: GraphStore) -> "GraphService":
        engine = ConsistencyEngine(store)
        return cls(
            store=store,
            engine=engine,
            classes=ClassRegistry(engine),
            nodes=NodeStore(engine),
            edges=EdgeStore(engine),
        )

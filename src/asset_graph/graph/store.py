from __future__ import annotations

from collections.abc import Iterable
from contextlib import AbstractContextManager
from typing import Protocol

from .models import AttributeBag, ClassDef, Edge, EdgeCriteria, Node


class GraphStore(Protocol):
    """Abstraction for the backing store of classes, nodes and edges.

    Implementations do row mechanics only; referential rules and cascades live
    in the consistency engine. Every method is atomic on its own and joins the
    enclosing `transaction()` when one is open.
    """

    def ensure_schema(self) -> None: ...

    def close(self) -> None: ...

    def transaction(self) -> AbstractContextManager[None]: ...

    # classes
    def insert_class(self, cls: ClassDef) -> None: ...

    def get_class(self, identifier: str) -> ClassDef | None: ...

    def list_classes(self) -> list[ClassDef]: ...

    def delete_class(self, identifier: str) -> int: ...

    # nodes
    def insert_node(self, node: Node) -> None: ...

    def get_node(self, identifier: str) -> Node | None: ...

    def list_nodes(self, class_id: str) -> list[Node]: ...

    def update_node_attributes(self, identifier: str, attributes: AttributeBag) -> int: ...

    def delete_nodes(self, identifiers: Iterable[str]) -> int: ...

    # edges
    def insert_edge(self, edge: Edge) -> None: ...

    def edges_touching(self, node_ids: Iterable[str]) -> list[Edge]: ...

    def find_edges(self, criteria: EdgeCriteria) -> list[Edge]: ...

    def delete_edges(self, criteria: EdgeCriteria) -> int: ...

    def delete_edges_touching(self, node_ids: Iterable[str]) -> int: ...

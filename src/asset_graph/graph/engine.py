"""Referential rules and cascades over the class → node → edge graph.

Every check-then-write and every cascade runs inside a single store
transaction, so a failure halfway leaves the graph as it was.
"""

from __future__ import annotations

import logging

from .errors import NotFound
from .models import CascadeStats, ClassDef, Node
from .store import GraphStore

logger = logging.getLogger(__name__)

CLASS_NOT_FOUND = "Classe não encontrada."
NODE_NOT_FOUND = "Ativo não encontrado."
SOURCE_NOT_FOUND = "Ativo de origem não encontrado."
DESTINATION_NOT_FOUND = "Ativo de destino não encontrado."


class ConsistencyEngine:
    def __init__(self, store: GraphStore):
        self.store = store

    def require_class(self, class_id: str) -> ClassDef:
        cls = self.store.get_class(class_id)
        if cls is None:
            raise NotFound(CLASS_NOT_FOUND, what="class")
        return cls

    def require_node(self, node_id: str) -> Node:
        node = self.store.get_node(node_id)
        if node is None:
            raise NotFound(NODE_NOT_FOUND, what="node")
        return node

    def require_endpoints(self, source_id: str, destination_id: str) -> tuple[Node, Node]:
        """Resolve both edge endpoints. The source is always checked first."""
        source = self.store.get_node(source_id)
        if source is None:
            raise NotFound(SOURCE_NOT_FOUND, what="source")
        destination = self.store.get_node(destination_id)
        if destination is None:
            raise NotFound(DESTINATION_NOT_FOUND, what="destination")
        return source, destination

    def remove_node(self, node_id: str) -> CascadeStats:
        """Delete a node's edges, then the node."""
        with self.store.transaction():
            self.require_node(node_id)
            edges = self.store.delete_edges_touching([node_id])
            self.store.delete_nodes([node_id])

        logger.info("removed node %s (cascade: %d edges)", node_id, edges)
        return CascadeStats(edges=edges, nodes=1)

    def remove_class(self, class_id: str) -> CascadeStats:
        """Delete edges touching the class's nodes, then the nodes, then the class."""
        with self.store.transaction():
            self.require_class(class_id)
            node_ids = [n.identifier for n in self.store.list_nodes(class_id)]
            edges = self.store.delete_edges_touching(node_ids)
            nodes = self.store.delete_nodes(node_ids)
            self.store.delete_class(class_id)

        logger.info("removed class %s (cascade: %d nodes, %d edges)", class_id, nodes, edges)
        return CascadeStats(edges=edges, nodes=nodes)

from __future__ import annotations

import logging

from .engine import ConsistencyEngine
from .errors import InvalidArgument, NotFound
from .models import Edge, EdgeCriteria

logger = logging.getLogger(__name__)


class EdgeStore:
    """Vinculos: typed directed links between two existing nodes."""

    def __init__(self, engine: ConsistencyEngine):
        self.engine = engine
        self.store = engine.store

    def create(self, source_id: str | None, destination_id: str | None, type: str | None) -> Edge:
        if not source_id or not destination_id or not type:
            raise InvalidArgument("Por favor, forneça origemId, destinoId e tipo.")

        edge = Edge(source_id=source_id, destination_id=destination_id, type=type)
        with self.store.transaction():
            self.engine.require_endpoints(source_id, destination_id)
            self.store.insert_edge(edge)

        logger.info("created edge %s -[%s]-> %s", source_id, type, destination_id)
        return edge

    def list_touching(self, node_id: str) -> list[Edge]:
        """Edges where the node is source or destination; none at all is not-found."""
        with self.store.transaction():
            self.engine.require_node(node_id)
            edges = self.store.edges_touching([node_id])
        if not edges:
            raise NotFound("Nenhum vínculo encontrado para este ativo.", what="edges")
        return edges

    def remove_by_criteria(
        self,
        source_id: str | None = None,
        destination_id: str | None = None,
        type: str | None = None,
    ) -> int:
        """Delete every edge matching all supplied criteria; returns the count.

        Empty strings count as "not supplied".
        """
        criteria = EdgeCriteria(
            source_id=source_id or None,
            destination_id=destination_id or None,
            type=type or None,
        )
        if criteria.is_empty():
            raise InvalidArgument("Informe ao menos um dos critérios: origemId, destinoId ou tipo.")

        with self.store.transaction():
            if not self.store.find_edges(criteria):
                raise NotFound("Nenhum vínculo encontrado com os critérios fornecidos.", what="edges")
            deleted = self.store.delete_edges(criteria)

        logger.info("removed %d edges matching %s", deleted, criteria)
        return deleted

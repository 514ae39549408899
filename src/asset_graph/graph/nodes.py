from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from .engine import ConsistencyEngine
from .errors import Conflict, InvalidArgument, NotFound
from .models import CascadeStats, Node

logger = logging.getLogger(__name__)

IDENTIFIER_REQUIRED = "O identificador do ativo é obrigatório."


class NodeStore:
    """Ativos: instances of a class with a free-form attribute bag."""

    def __init__(self, engine: ConsistencyEngine):
        self.engine = engine
        self.store = engine.store

    def create(self, class_id: str | None, identifier: str | None, attributes: Any) -> Node:
        if not class_id or not identifier or attributes is None:
            raise InvalidArgument("Por favor, forneça classeId, identificador e atributos.")
        if not isinstance(attributes, Mapping):
            raise InvalidArgument("Os atributos devem ser fornecidos no formato de objeto.")

        node = Node(identifier=identifier, class_id=class_id, attributes=dict(attributes))
        with self.store.transaction():
            # class must resolve before any node row is written
            self.engine.require_class(class_id)
            try:
                self.store.insert_node(node)
            except Conflict as e:
                raise Conflict(f"Ativo '{identifier}' já existe.") from e

        logger.info("created node %s in class %s", identifier, class_id)
        return node

    def list_by_class(self, class_id: str) -> list[Node]:
        """Nodes of a class. An empty class is reported as not-found, not as []."""
        with self.store.transaction():
            self.engine.require_class(class_id)
            nodes = self.store.list_nodes(class_id)
        if not nodes:
            raise NotFound("Nenhum ativo encontrado para esta classe.", what="nodes")
        return nodes

    def get(self, identifier: str) -> Node:
        return self.engine.require_node(identifier)

    def update(self, identifier: str | None, attributes: Any) -> Node:
        """Replace the node's attribute bag wholesale (no merge)."""
        if not identifier:
            raise InvalidArgument(IDENTIFIER_REQUIRED)
        if not isinstance(attributes, Mapping):
            raise InvalidArgument("Os atributos devem ser fornecidos no formato de objeto.")

        with self.store.transaction():
            current = self.engine.require_node(identifier)
            self.store.update_node_attributes(identifier, dict(attributes))

        logger.info("updated node %s", identifier)
        return Node(identifier=identifier, class_id=current.class_id, attributes=dict(attributes))

    def remove(self, identifier: str | None) -> CascadeStats:
        if not identifier:
            raise InvalidArgument(IDENTIFIER_REQUIRED)
        return self.engine.remove_node(identifier)

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from .engine import ConsistencyEngine
from .errors import Conflict, InvalidArgument
from .models import AttributeBag, CascadeStats, ClassDef

logger = logging.getLogger(__name__)


class ClassRegistry:
    """Class definitions: identifier → attribute template."""

    def __init__(self, engine: ConsistencyEngine):
        self.engine = engine
        self.store = engine.store

    def define(self, identifier: str | None, attributes: Any) -> ClassDef:
        if not identifier or not isinstance(attributes, Mapping):
            raise InvalidArgument("Por favor, forneça identificador e atributos (objeto).")

        cls = ClassDef(identifier=identifier, attributes=dict(attributes))
        try:
            self.store.insert_class(cls)
        except Conflict as e:
            raise Conflict(f"Classe '{identifier}' já existe.") from e

        logger.info("defined class %s (%d attributes)", identifier, len(cls.attributes))
        return cls

    def list_all(self) -> list[ClassDef]:
        return self.store.list_classes()

    def get(self, identifier: str) -> ClassDef:
        return self.engine.require_class(identifier)

    def get_attributes(self, identifier: str) -> AttributeBag:
        return self.get(identifier).attributes

    def remove(self, identifier: str | None) -> CascadeStats:
        if not identifier:
            raise InvalidArgument("O identificador da classe é obrigatório.")
        return self.engine.remove_class(identifier)

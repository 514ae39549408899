from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from asset_graph.graph.models import ClassDef, Edge, Node

# Wire names follow the original service (Portuguese field names).


class _Wire(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class ClassIn(_Wire):
    identifier: str | None = Field(default=None, alias="identificador")
    attributes: Any = Field(default=None, alias="atributos")


class NodeIn(_Wire):
    class_id: str | None = Field(default=None, alias="classeId")
    identifier: str | None = Field(default=None, alias="identificador")
    attributes: Any = Field(default=None, alias="atributos")


class NodeUpdateIn(_Wire):
    identifier: str | None = Field(default=None, alias="identificador")
    attributes: Any = Field(default=None, alias="atributos")


class EdgeIn(_Wire):
    source_id: str | None = Field(default=None, alias="origemId")
    destination_id: str | None = Field(default=None, alias="destinoId")
    type: str | None = Field(default=None, alias="tipo")


class EdgeCriteriaIn(EdgeIn):
    pass


class ClassOut(_Wire):
    identifier: str = Field(alias="identificador")
    attributes: dict[str, Any] = Field(alias="atributos")

    @classmethod
    def of(cls, c: ClassDef) -> "ClassOut":
        return cls(identifier=c.identifier, attributes=c.attributes)


class NodeOut(_Wire):
    identifier: str = Field(alias="identificador")
    class_id: str = Field(alias="classeId")
    attributes: dict[str, Any] = Field(alias="atributos")

    @classmethod
    def of(cls, n: Node) -> "NodeOut":
        return cls(identifier=n.identifier, class_id=n.class_id, attributes=n.attributes)


class EdgeOut(_Wire):
    source_id: str = Field(alias="origemId")
    destination_id: str = Field(alias="destinoId")
    type: str = Field(alias="tipo")

    @classmethod
    def of(cls, e: Edge) -> "EdgeOut":
        return cls(source_id=e.source_id, destination_id=e.destination_id, type=e.type)


def dump(model: BaseModel) -> dict[str, Any]:
    return model.model_dump(by_alias=True)

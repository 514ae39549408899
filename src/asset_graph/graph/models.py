from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

# Free-form JSON-like payload shared by class templates and node instances.
AttributeBag = dict[str, Any]


@dataclass(frozen=True, slots=True)
class ClassDef:
    """A named attribute template.

    Values in `attributes` are illustrative placeholders; nodes of the class
    are never checked against them.
    """

    identifier: str
    attributes: AttributeBag = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class Node:
    """An ativo: an instance belonging to exactly one class."""

    identifier: str
    class_id: str
    attributes: AttributeBag = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class Edge:
    """A vinculo: a directed, typed link between two nodes.

    Edges have no identifier of their own.
    """

    source_id: str
    destination_id: str
    type: str


@dataclass(frozen=True, slots=True)
class EdgeCriteria:
    """Conjunctive filter over edges. `None` means "don't constrain"."""

    source_id: str | None = None
    destination_id: str | None = None
    type: str | None = None

    def is_empty(self) -> bool:
        return not (self.source_id or self.destination_id or self.type)


@dataclass(frozen=True, slots=True)
class CascadeStats:
    edges: int = 0
    nodes: int = 0

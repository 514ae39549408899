"""Entity graph core.

This module provides:
- Class / Node / Edge models and the attribute bag type
- A store abstraction + SQLite implementation
- The consistency engine (reference checks and cascades)
- Class registry, node store and edge store built on top of it
"""

from .classes import ClassRegistry
from .edges import EdgeStore
from .engine import ConsistencyEngine
from .errors import Conflict, GraphError, InvalidArgument, NotFound, StorageError
from .models import AttributeBag, CascadeStats, ClassDef, Edge, EdgeCriteria, Node
from .nodes import NodeStore
from .service import GraphService
from .sqlite_store import SQLiteGraphStore
from .store import GraphStore

__all__ = [
    "AttributeBag",
    "CascadeStats",
    "ClassDef",
    "ClassRegistry",
    "Conflict",
    "ConsistencyEngine",
    "Edge",
    "EdgeCriteria",
    "EdgeStore",
    "GraphError",
    "GraphService",
    "GraphStore",
    "InvalidArgument",
    "Node",
    "NodeStore",
    "NotFound",
    "SQLiteGraphStore",
    "StorageError",
]

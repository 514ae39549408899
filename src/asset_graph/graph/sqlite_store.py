from __future__ import annotations

import json
import logging
import sqlite3
import threading
from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

from .errors import Conflict, InvalidArgument, StorageError
from .models import AttributeBag, ClassDef, Edge, EdgeCriteria, Node

logger = logging.getLogger(__name__)

SCHEMA = """
PRAGMA journal_mode=WAL;

CREATE TABLE IF NOT EXISTS classes (
  identifier TEXT PRIMARY KEY,
  attributes_json TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS nodes (
  identifier TEXT PRIMARY KEY,
  class_id TEXT NOT NULL REFERENCES classes(identifier),
  attributes_json TEXT NOT NULL
);

-- no primary key: duplicate (source, destination, type) triples are allowed
CREATE TABLE IF NOT EXISTS edges (
  source_id TEXT NOT NULL REFERENCES nodes(identifier),
  destination_id TEXT NOT NULL REFERENCES nodes(identifier),
  type TEXT NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_nodes_class_id ON nodes(class_id);
CREATE INDEX IF NOT EXISTS idx_edges_source_id ON edges(source_id);
CREATE INDEX IF NOT EXISTS idx_edges_destination_id ON edges(destination_id);
"""

MEMORY = ":memory:"


def _dumps(attributes: AttributeBag) -> str:
    try:
        return json.dumps(attributes, ensure_ascii=False, allow_nan=False)
    except ValueError as e:
        # NaN / Infinity are not JSON; reject before any row is written
        raise InvalidArgument("Os atributos devem ser fornecidos no formato de objeto.") from e


def _loads(s: str | None) -> AttributeBag:
    return json.loads(s or "{}")


def _placeholders(n: int) -> str:
    return ",".join("?" * n)


def _where(criteria: EdgeCriteria) -> tuple[str, list[Any]]:
    clauses: list[str] = []
    params: list[Any] = []
    if criteria.source_id:
        clauses.append("source_id=?")
        params.append(criteria.source_id)
    if criteria.destination_id:
        clauses.append("destination_id=?")
        params.append(criteria.destination_id)
    if criteria.type:
        clauses.append("type=?")
        params.append(criteria.type)
    if not clauses:
        # Callers validate criteria; refuse to match every edge by accident.
        raise ValueError("empty edge criteria")
    return " AND ".join(clauses), params


class SQLiteGraphStore:
    """SQLite-backed graph store.

    One connection per store, guarded by a re-entrant lock so a cascade holds
    the database for its whole transaction. `path=":memory:"` gives an isolated
    throwaway store (handy in tests).
    """

    def __init__(self, path: str | Path = MEMORY, *, timeout: float = 5.0):
        self.path = str(path)
        if self.path != MEMORY:
            Path(self.path).expanduser().parent.mkdir(parents=True, exist_ok=True)
            self.path = str(Path(self.path).expanduser())

        # isolation_level=None: transactions are opened explicitly in transaction()
        self.conn = sqlite3.connect(
            self.path, timeout=timeout, check_same_thread=False, isolation_level=None
        )
        self.conn.execute("PRAGMA foreign_keys=ON")
        self._lock = threading.RLock()
        self._depth = 0

    def ensure_schema(self) -> None:
        with self._lock:
            self.conn.executescript(SCHEMA)

    def close(self) -> None:
        with self._lock:
            self.conn.close()

    @contextmanager
    def transaction(self) -> Iterator[None]:
        """Open (or join) a transaction.

        Only the outermost block commits; any exception, including a failed
        BEGIN or COMMIT, rolls back everything done since it began. sqlite
        errors are translated to graph errors.
        """
        with self._lock:
            outer = self._depth == 0
            if outer:
                try:
                    self.conn.execute("BEGIN IMMEDIATE")
                except sqlite3.Error as e:
                    raise self._translate(e) from e
            self._depth += 1
            try:
                yield
            except BaseException as e:
                self._depth -= 1
                if outer:
                    self._rollback(e)
                if isinstance(e, sqlite3.Error):
                    raise self._translate(e) from e
                raise
            self._depth -= 1
            if outer:
                try:
                    self.conn.execute("COMMIT")
                except sqlite3.Error as e:
                    self._rollback(e)
                    raise self._translate(e) from e

    def _rollback(self, cause: BaseException) -> None:
        # sqlite may already have rolled back on its own (e.g. SQLITE_FULL)
        if not self.conn.in_transaction:
            return
        try:
            self.conn.execute("ROLLBACK")
        except sqlite3.Error:
            logger.exception("rollback failed after: %s", cause)
        else:
            logger.debug("rolled back transaction: %s", cause)

    @staticmethod
    def _translate(e: sqlite3.Error) -> Exception:
        msg = str(e)
        if isinstance(e, sqlite3.IntegrityError) and "UNIQUE" in msg:
            return Conflict(msg)
        return StorageError(msg)

    # --- classes ---

    def insert_class(self, cls: ClassDef) -> None:
        with self.transaction():
            self.conn.execute(
                "INSERT INTO classes(identifier, attributes_json) VALUES (?,?)",
                (cls.identifier, _dumps(cls.attributes)),
            )

    def get_class(self, identifier: str) -> ClassDef | None:
        with self.transaction():
            row = self.conn.execute(
                "SELECT identifier, attributes_json FROM classes WHERE identifier=?",
                (identifier,),
            ).fetchone()
        if not row:
            return None
        return ClassDef(identifier=row[0], attributes=_loads(row[1]))

    def list_classes(self) -> list[ClassDef]:
        with self.transaction():
            rows = self.conn.execute(
                "SELECT identifier, attributes_json FROM classes ORDER BY rowid"
            ).fetchall()
        return [ClassDef(identifier=r[0], attributes=_loads(r[1])) for r in rows]

    def delete_class(self, identifier: str) -> int:
        with self.transaction():
            cur = self.conn.execute("DELETE FROM classes WHERE identifier=?", (identifier,))
        return cur.rowcount

    # --- nodes ---

    def insert_node(self, node: Node) -> None:
        with self.transaction():
            self.conn.execute(
                "INSERT INTO nodes(identifier, class_id, attributes_json) VALUES (?,?,?)",
                (node.identifier, node.class_id, _dumps(node.attributes)),
            )

    def get_node(self, identifier: str) -> Node | None:
        with self.transaction():
            row = self.conn.execute(
                "SELECT identifier, class_id, attributes_json FROM nodes WHERE identifier=?",
                (identifier,),
            ).fetchone()
        if not row:
            return None
        return Node(identifier=row[0], class_id=row[1], attributes=_loads(row[2]))

    def list_nodes(self, class_id: str) -> list[Node]:
        with self.transaction():
            rows = self.conn.execute(
                "SELECT identifier, class_id, attributes_json FROM nodes WHERE class_id=? ORDER BY rowid",
                (class_id,),
            ).fetchall()
        return [Node(identifier=r[0], class_id=r[1], attributes=_loads(r[2])) for r in rows]

    def update_node_attributes(self, identifier: str, attributes: AttributeBag) -> int:
        with self.transaction():
            cur = self.conn.execute(
                "UPDATE nodes SET attributes_json=? WHERE identifier=?",
                (_dumps(attributes), identifier),
            )
        return cur.rowcount

    def delete_nodes(self, identifiers: Iterable[str]) -> int:
        ids = list(identifiers)
        if not ids:
            return 0
        with self.transaction():
            cur = self.conn.execute(
                f"DELETE FROM nodes WHERE identifier IN ({_placeholders(len(ids))})", ids
            )
        return cur.rowcount

    # --- edges ---

    def insert_edge(self, edge: Edge) -> None:
        with self.transaction():
            self.conn.execute(
                "INSERT INTO edges(source_id, destination_id, type) VALUES (?,?,?)",
                (edge.source_id, edge.destination_id, edge.type),
            )

    def edges_touching(self, node_ids: Iterable[str]) -> list[Edge]:
        ids = list(node_ids)
        if not ids:
            return []
        marks = _placeholders(len(ids))
        with self.transaction():
            rows = self.conn.execute(
                f"""
                SELECT source_id, destination_id, type FROM edges
                WHERE source_id IN ({marks}) OR destination_id IN ({marks})
                ORDER BY rowid
                """,
                ids + ids,
            ).fetchall()
        return [Edge(source_id=r[0], destination_id=r[1], type=r[2]) for r in rows]

    def find_edges(self, criteria: EdgeCriteria) -> list[Edge]:
        where, params = _where(criteria)
        with self.transaction():
            rows = self.conn.execute(
                f"SELECT source_id, destination_id, type FROM edges WHERE {where} ORDER BY rowid",
                params,
            ).fetchall()
        return [Edge(source_id=r[0], destination_id=r[1], type=r[2]) for r in rows]

    def delete_edges(self, criteria: EdgeCriteria) -> int:
        where, params = _where(criteria)
        with self.transaction():
            cur = self.conn.execute(f"DELETE FROM edges WHERE {where}", params)
        return cur.rowcount

    def delete_edges_touching(self, node_ids: Iterable[str]) -> int:
        ids = list(node_ids)
        if not ids:
            return 0
        marks = _placeholders(len(ids))
        with self.transaction():
            cur = self.conn.execute(
                f"DELETE FROM edges WHERE source_id IN ({marks}) OR destination_id IN ({marks})",
                ids + ids,
            )
        return cur.rowcount

from __future__ import annotations

import uuid
from typing import Any, Callable, Mapping, Optional, Sequence

from ..core.enums import ChangeKind
from ..storage.document_store import (
    ChangeEvent,
    ChangeNotifier,
    CollectionName,
    DocumentStore,
    Listener,
    collection_name,
    compact,
)
from .connection import DatabaseConnection
from .mysql_base import db_cursor, dump_body, dump_value, fetchall, fetchone, json_path, load_body


class MySQLDocumentStore(DocumentStore):
    """Document store backed by the single ``documents`` table (JSON bodies).

    Change notifications reach listeners registered in this process only.
    """

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory
        self._notifier = ChangeNotifier()

    @staticmethod
    def _out(doc_id: str, body: Any) -> dict:
        out = load_body(body)
        out["id"] = doc_id
        return out

    def get(self, collection: CollectionName, doc_id: str) -> Optional[dict]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT doc_id, body FROM documents WHERE collection=%s AND doc_id=%s",
                (collection_name(collection), str(doc_id)),
            )
            r = fetchone(cur)
            return self._out(r["doc_id"], r["body"]) if r else None

    def list(self, collection: CollectionName, **filters: Any) -> Sequence[dict]:
        sql = "SELECT doc_id, body FROM documents WHERE collection=%s"
        params: list = [collection_name(collection)]
        for field, value in filters.items():
            # JSON-to-JSON comparison keeps strings, numbers and booleans distinct.
            sql += " AND JSON_EXTRACT(body, %s) = CAST(%s AS JSON)"
            params.extend([json_path(field), dump_value(value)])
        sql += " ORDER BY created_at ASC, doc_id ASC"

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            rows = fetchall(cur)
        return [self._out(r["doc_id"], r["body"]) for r in rows]

    def add(self, collection: CollectionName, data: Mapping[str, Any]) -> str:
        doc_id = uuid.uuid4().hex
        self.set(collection, doc_id, data)
        return doc_id

    def set(self, collection: CollectionName, doc_id: str, data: Mapping[str, Any]) -> None:
        name = collection_name(collection)
        body = compact(data)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO documents(collection, doc_id, body)
                VALUES(%s,%s,%s)
                ON DUPLICATE KEY UPDATE body=VALUES(body)
                """,
                (name, str(doc_id), dump_body(body)),
            )
            # rowcount is 1 for an insert, 2 for an update of an existing row.
            kind = ChangeKind.ADDED if cur.rowcount == 1 else ChangeKind.MODIFIED
        self._notifier.emit(ChangeEvent(name, str(doc_id), kind, {**body, "id": str(doc_id)}))

    def update(self, collection: CollectionName, doc_id: str, changes: Mapping[str, Any]) -> bool:
        name = collection_name(collection)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT body FROM documents WHERE collection=%s AND doc_id=%s FOR UPDATE",
                (name, str(doc_id)),
            )
            r = fetchone(cur)
            if not r:
                return False
            body = load_body(r["body"])
            body.update({k: v for k, v in changes.items() if k != "id"})
            cur.execute(
                "UPDATE documents SET body=%s WHERE collection=%s AND doc_id=%s",
                (dump_body(body), name, str(doc_id)),
            )
        self._notifier.emit(ChangeEvent(name, str(doc_id), ChangeKind.MODIFIED, {**body, "id": str(doc_id)}))
        return True

    def delete(self, collection: CollectionName, doc_id: str) -> bool:
        name = collection_name(collection)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM documents WHERE collection=%s AND doc_id=%s", (name, str(doc_id)))
            deleted = cur.rowcount > 0
        if deleted:
            self._notifier.emit(ChangeEvent(name, str(doc_id), ChangeKind.REMOVED))
        return deleted

    def subscribe(self, collection: CollectionName, listener: Listener) -> Callable[[], None]:
        return self._notifier.subscribe(collection, listener)

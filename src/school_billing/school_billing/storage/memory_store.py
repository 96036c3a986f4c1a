from __future__ import annotations

import copy
import itertools
from typing import Any, Callable, Mapping, Optional, Sequence

from ..core.enums import ChangeKind
from .document_store import (
    ChangeEvent,
    ChangeNotifier,
    CollectionName,
    DocumentStore,
    Listener,
    collection_name,
    compact,
    matches,
)


class InMemoryDocumentStore(DocumentStore):
    """Process-local store used for development and tests."""

    def __init__(self):
        self._data: dict[str, dict[str, dict]] = {}
        self._ids = itertools.count(1)
        self._notifier = ChangeNotifier()

    def _bucket(self, collection: CollectionName) -> dict[str, dict]:
        return self._data.setdefault(collection_name(collection), {})

    @staticmethod
    def _out(doc_id: str, doc: Mapping[str, Any]) -> dict:
        out = copy.deepcopy(dict(doc))
        out["id"] = doc_id
        return out

    def get(self, collection: CollectionName, doc_id: str) -> Optional[dict]:
        doc = self._bucket(collection).get(str(doc_id))
        return self._out(str(doc_id), doc) if doc is not None else None

    def list(self, collection: CollectionName, **filters: Any) -> Sequence[dict]:
        return [
            self._out(doc_id, doc)
            for doc_id, doc in self._bucket(collection).items()
            if matches(doc, filters)
        ]

    def add(self, collection: CollectionName, data: Mapping[str, Any]) -> str:
        name = collection_name(collection)
        doc_id = f"{name}-{next(self._ids)}"
        self.set(collection, doc_id, data)
        return doc_id

    def set(self, collection: CollectionName, doc_id: str, data: Mapping[str, Any]) -> None:
        bucket = self._bucket(collection)
        kind = ChangeKind.MODIFIED if str(doc_id) in bucket else ChangeKind.ADDED
        bucket[str(doc_id)] = copy.deepcopy(compact(data))
        self._notifier.emit(ChangeEvent(collection_name(collection), str(doc_id), kind, self.get(collection, doc_id)))

    def update(self, collection: CollectionName, doc_id: str, changes: Mapping[str, Any]) -> bool:
        bucket = self._bucket(collection)
        doc = bucket.get(str(doc_id))
        if doc is None:
            return False
        doc.update({k: copy.deepcopy(v) for k, v in changes.items() if k != "id"})
        self._notifier.emit(
            ChangeEvent(collection_name(collection), str(doc_id), ChangeKind.MODIFIED, self.get(collection, doc_id))
        )
        return True

    def delete(self, collection: CollectionName, doc_id: str) -> bool:
        removed = self._bucket(collection).pop(str(doc_id), None)
        if removed is None:
            return False
        self._notifier.emit(ChangeEvent(collection_name(collection), str(doc_id), ChangeKind.REMOVED))
        return True

    def subscribe(self, collection: CollectionName, listener: Listener) -> Callable[[], None]:
        return self._notifier.subscribe(collection, listener)

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Mapping, Optional, Protocol, Sequence, Union

from ..core.enums import ChangeKind, Collection

logger = logging.getLogger(__name__)

CollectionName = Union[Collection, str]


@dataclass(frozen=True)
class ChangeEvent:
    collection: str
    doc_id: str
    kind: ChangeKind
    data: Optional[dict] = None


Listener = Callable[[ChangeEvent], None]


def collection_name(collection: CollectionName) -> str:
    return collection.value if isinstance(collection, Collection) else str(collection)


def compact(data: Mapping[str, Any]) -> dict:
    """Write-path rule for new documents: ``None`` fields are omitted."""
    return {k: v for k, v in data.items() if v is not None and k != "id"}


def matches(doc: Mapping[str, Any], filters: Mapping[str, Any]) -> bool:
    return all(doc.get(k) == v for k, v in filters.items())


class DocumentStore(Protocol):
    """CRUD + change subscription over named collections of JSON-like records.

    Every returned document carries its identifier under ``"id"``.
    """

    def get(self, collection: CollectionName, doc_id: str) -> Optional[dict]:
        raise NotImplementedError

    def list(self, collection: CollectionName, **filters: Any) -> Sequence[dict]:
        raise NotImplementedError

    def add(self, collection: CollectionName, data: Mapping[str, Any]) -> str:
        """Create a document with a store-assigned id and return the id."""

        raise NotImplementedError

    def set(self, collection: CollectionName, doc_id: str, data: Mapping[str, Any]) -> None:
        """Create or replace the document stored under ``doc_id``."""

        raise NotImplementedError

    def update(self, collection: CollectionName, doc_id: str, changes: Mapping[str, Any]) -> bool:
        """Merge ``changes`` into an existing document.

        ``None`` values are stored as null (explicit clear).
        """

        raise NotImplementedError

    def delete(self, collection: CollectionName, doc_id: str) -> bool:
        raise NotImplementedError

    def subscribe(self, collection: CollectionName, listener: Listener) -> Callable[[], None]:
        """Register a change listener; returns the unsubscribe callable."""

        raise NotImplementedError


class ChangeNotifier:
    """Observer registry shared by store implementations."""

    def __init__(self):
        self._listeners: dict[str, list[Listener]] = {}

    def subscribe(self, collection: CollectionName, listener: Listener) -> Callable[[], None]:
        name = collection_name(collection)
        self._listeners.setdefault(name, []).append(listener)

        def unsubscribe() -> None:
            listeners = self._listeners.get(name, [])
            if listener in listeners:
                listeners.remove(listener)

        return unsubscribe

    def emit(self, event: ChangeEvent) -> None:
        for listener in list(self._listeners.get(event.collection, [])):
            try:
                listener(event)
            except Exception:
                # A failing subscriber must not undo a committed write.
                logger.exception("Change listener failed for %s/%s", event.collection, event.doc_id)

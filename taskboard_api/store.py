"""
Document store for users and tasks.

Two backends share one interface:
  MemoryStore     process-local dicts (default, used by the tests)
  FirestoreStore  Cloud Firestore via firebase-admin (see firestore_store.py)

Documents are plain dicts keyed by collection name. Every document returned
carries its identifier under "id". Filters are (field, op, value) tuples with
op one of "==", "!=", "<", "in", "array_contains".
"""

import copy
import logging
import threading
import uuid
from typing import Any, Optional

from taskboard_core.constants import DEFAULT_STORE_URL
from taskboard_core.exceptions import StoreError

logger = logging.getLogger(__name__)

Where = list[tuple[str, str, Any]]


def _matches(doc: dict, where: Where) -> bool:
    for field_name, op, value in where:
        if field_name not in doc:
            return False
        current = doc[field_name]
        if op == "==":
            ok = current == value
        elif op == "!=":
            ok = current != value
        elif op == "<":
            ok = current is not None and current < value
        elif op == "in":
            ok = current in value
        elif op == "array_contains":
            ok = isinstance(current, list) and value in current
        else:
            raise StoreError(f"Unsupported filter operator {op!r}")
        if not ok:
            return False
    return True


class MemoryStore:
    """In-memory document store. Writes to a collection are serialized by a lock."""

    def __init__(self) -> None:
        self._collections: dict[str, dict[str, dict]] = {}
        self._lock = threading.Lock()

    def _collection(self, name: str) -> dict[str, dict]:
        return self._collections.setdefault(name, {})

    def clear(self) -> None:
        with self._lock:
            self._collections.clear()

    # -- writes --

    def insert(self, collection: str, data: dict) -> dict:
        doc_id = uuid.uuid4().hex
        doc = copy.deepcopy(data)
        doc["id"] = doc_id
        with self._lock:
            self._collection(collection)[doc_id] = doc
        return copy.deepcopy(doc)

    def update(self, collection: str, doc_id: str, updates: dict) -> Optional[dict]:
        with self._lock:
            doc = self._collection(collection).get(doc_id)
            if doc is None:
                return None
            doc.update(copy.deepcopy(updates))
            return copy.deepcopy(doc)

    def delete(self, collection: str, doc_id: str) -> bool:
        with self._lock:
            return self._collection(collection).pop(doc_id, None) is not None

    # -- reads --

    def get(self, collection: str, doc_id: str) -> Optional[dict]:
        doc = self._collection(collection).get(doc_id)
        return copy.deepcopy(doc) if doc is not None else None

    def find(
        self,
        collection: str,
        where: Optional[Where] = None,
        order_by: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None,
    ) -> list[dict]:
        docs = [d for d in self._collection(collection).values() if _matches(d, where or [])]
        if order_by:
            docs = [d for d in docs if d.get(order_by) is not None]
            docs.sort(key=lambda d: d[order_by], reverse=descending)
        if limit is not None:
            docs = docs[:limit]
        return copy.deepcopy(docs)

    def count(self, collection: str, where: Optional[Where] = None) -> int:
        return sum(1 for d in self._collection(collection).values() if _matches(d, where or []))


# ── Singleton ────────────────────────────────────────────────────────────────

_store: Any = None


def init_store(store_url: str = DEFAULT_STORE_URL) -> Any:
    """Select and initialize the store backend from a connection URL. Call once at startup."""
    global _store

    if store_url.startswith("memory://"):
        _store = MemoryStore()
        logger.info("Using in-memory document store")
        return _store

    if store_url.startswith("firestore://"):
        from taskboard_api.firestore_store import FirestoreStore, init_firebase

        location = store_url[len("firestore://"):].strip("/")
        project_id, _, database = location.partition("/")
        db = init_firebase(project_id or None, database or None)
        if db is None:
            raise StoreError("Firestore is not available; check credentials")
        _store = FirestoreStore(db)
        logger.info("Using Firestore document store (project=%s)", project_id or "default")
        return _store

    raise StoreError(f"Unsupported store URL {store_url!r}")


def get_store() -> Any:
    """Return the active store, falling back to an in-memory one."""
    global _store
    if _store is None:
        _store = MemoryStore()
    return _store


def set_store(store: Any) -> None:
    """Replace the active store (used by tests)."""
    global _store
    _store = store

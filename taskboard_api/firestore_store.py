"""
Cloud Firestore backend for the Taskboard document store.

Handles:
- Firebase Admin SDK initialization
- CRUD and filtered queries over the users/ and tasks/ collections
- Server-side count aggregation for dashboards

Credentials are read from (in order):
  1. GOOGLE_APPLICATION_CREDENTIALS env var (path to service account JSON)
  2. FIREBASE_SERVICE_ACCOUNT_JSON env var (inline JSON string)
  3. ~/.config/taskboard/firebase-sa.json
"""

import json
import logging
import os
from typing import Any, Optional

from taskboard_core.exceptions import StoreError

logger = logging.getLogger(__name__)

_db = None

# Lazy imports: firebase_admin is only needed for the Firestore backend
firebase_admin = None
credentials = None
firestore = None


def _import_firebase() -> bool:
    """Import firebase_admin lazily so the module loads even without the package."""
    global firebase_admin, credentials, firestore
    if firebase_admin is not None:
        return True
    try:
        import firebase_admin as _fa
        from firebase_admin import credentials as _cred
        from firebase_admin import firestore as _fs

        firebase_admin = _fa
        credentials = _cred
        firestore = _fs
        return True
    except ImportError:
        logger.error("firebase-admin package not installed; Firestore store unavailable")
        return False


def _load_credentials():
    gac = os.environ.get("GOOGLE_APPLICATION_CREDENTIALS", "").strip()
    if gac and os.path.isfile(gac):
        return credentials.Certificate(gac)

    inline_json = os.environ.get("FIREBASE_SERVICE_ACCOUNT_JSON", "").strip()
    if inline_json:
        return credentials.Certificate(json.loads(inline_json))

    default_path = os.path.expanduser("~/.config/taskboard/firebase-sa.json")
    if os.path.isfile(default_path):
        return credentials.Certificate(default_path)

    return None


def init_firebase(project_id: Optional[str] = None, database: Optional[str] = None):
    """
    Initialize Firebase Admin SDK and return a Firestore client.

    Returns None if the package or credentials are missing.
    """
    global _db

    if _db is not None:
        return _db

    if not _import_firebase():
        return None

    cred = _load_credentials()
    if cred is None:
        logger.error(
            "No Firebase credentials found "
            "(set GOOGLE_APPLICATION_CREDENTIALS, FIREBASE_SERVICE_ACCOUNT_JSON, "
            "or place credentials at ~/.config/taskboard/firebase-sa.json)"
        )
        return None

    try:
        options = {"projectId": project_id} if project_id else None
        firebase_admin.initialize_app(cred, options)
        _db = firestore.client(database_id=database) if database else firestore.client()
    except Exception as exc:
        logger.error("Failed to initialize Firebase: %s", exc)
        return None

    logger.info("Firebase initialized (project=%s, database=%s)", project_id, database or "(default)")
    return _db


def _to_dict(snapshot) -> dict:
    data = snapshot.to_dict() or {}
    data["id"] = snapshot.id
    return data


class FirestoreStore:
    """Document store backed by a Firestore client."""

    def __init__(self, db: Any) -> None:
        self._db = db

    def _query(self, collection: str, where, order_by=None, descending=False, limit=None):
        query = self._db.collection(collection)
        for field_name, op, value in where or []:
            query = query.where(field_name, op, value)
        if order_by:
            direction = firestore.Query.DESCENDING if descending else firestore.Query.ASCENDING
            query = query.order_by(order_by, direction=direction)
        if limit is not None:
            query = query.limit(limit)
        return query

    def insert(self, collection: str, data: dict) -> dict:
        try:
            doc_ref = self._db.collection(collection).document()
            payload = {k: v for k, v in data.items() if k != "id"}
            doc_ref.set(payload)
            return {**payload, "id": doc_ref.id}
        except Exception as exc:
            logger.error("Firestore error in insert(%s): %s", collection, exc)
            raise StoreError("Failed to write document") from exc

    def update(self, collection: str, doc_id: str, updates: dict) -> Optional[dict]:
        try:
            doc_ref = self._db.collection(collection).document(doc_id)
            if not doc_ref.get().exists:
                return None
            doc_ref.update({k: v for k, v in updates.items() if k != "id"})
            return _to_dict(doc_ref.get())
        except Exception as exc:
            logger.error("Firestore error in update(%s): %s", collection, exc)
            raise StoreError("Failed to update document") from exc

    def delete(self, collection: str, doc_id: str) -> bool:
        try:
            doc_ref = self._db.collection(collection).document(doc_id)
            if not doc_ref.get().exists:
                return False
            doc_ref.delete()
            return True
        except Exception as exc:
            logger.error("Firestore error in delete(%s): %s", collection, exc)
            raise StoreError("Failed to delete document") from exc

    def get(self, collection: str, doc_id: str) -> Optional[dict]:
        try:
            doc = self._db.collection(collection).document(doc_id).get()
        except Exception as exc:
            logger.error("Firestore error in get(%s): %s", collection, exc)
            raise StoreError("Failed to read document") from exc
        return _to_dict(doc) if doc.exists else None

    def find(self, collection: str, where=None, order_by=None, descending=False, limit=None) -> list[dict]:
        try:
            docs = self._query(collection, where, order_by, descending, limit).stream()
            return [_to_dict(doc) for doc in docs]
        except Exception as exc:
            logger.error("Firestore error in find(%s): %s", collection, exc)
            raise StoreError("Failed to query documents") from exc

    def count(self, collection: str, where=None) -> int:
        try:
            results = self._query(collection, where).count().get()
            return int(results[0][0].value)
        except Exception as exc:
            logger.error("Firestore error in count(%s): %s", collection, exc)
            raise StoreError("Failed to count documents") from exc

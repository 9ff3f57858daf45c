"""
Firestore document store.

Thin async wrapper over ``firebase_admin.firestore_async``. Documents are
plain dicts; results carry the document id under the "id" key. Field values
are JSON-like, plus the Firestore types in ``FIRESTORE_LEAF_TYPES``
(timestamps, bytes, references and write sentinels such as DELETE_FIELD).
"""

import datetime
import logging
from typing import Any, Dict, List, Optional

from firebase_admin import firestore_async
from google.cloud import firestore

from ..values import Document, ensure_document

logger = logging.getLogger(__name__)

# Non-JSON values Firestore stores or applies as field transforms. Timestamps
# read back from the backend are datetime subclasses.
FIRESTORE_LEAF_TYPES = (
    bytes,
    datetime.datetime,
    firestore.GeoPoint,
    firestore.DocumentReference,
    firestore.AsyncDocumentReference,
    type(firestore.DELETE_FIELD),
    firestore.ArrayUnion,
    firestore.ArrayRemove,
    firestore.Increment,
    firestore.Maximum,
    firestore.Minimum,
)


class DocumentStore:
    """
    Document operations on a Firestore database.

    Args:
        app: firebase_admin app the client is bound to
        client: Pre-built AsyncClient (skips client creation)
    """

    def __init__(self, app: Any = None, client: Any = None):
        self._client = client if client is not None else firestore_async.client(app=app)

    @property
    def client(self) -> Any:
        """The underlying Firestore AsyncClient."""
        return self._client

    def _document(self, collection: str, doc_id: str) -> Any:
        return self._client.collection(collection).document(doc_id)

    async def add(self, collection: str, data: Dict[str, Any]) -> Document:
        """Add a document with a generated id and return it with its id."""
        data = ensure_document(data, FIRESTORE_LEAF_TYPES)
        _, doc_ref = await self._client.collection(collection).add(data)
        logger.debug(f"Added document {collection}/{doc_ref.id}")
        return {"id": doc_ref.id, **data}

    async def get(self, collection: str, doc_id: str) -> Optional[Document]:
        """Return the document data, or None if it does not exist."""
        snapshot = await self._document(collection, doc_id).get()
        if not snapshot.exists:
            logger.debug(f"Document not found: {collection}/{doc_id}")
            return None
        return snapshot.to_dict()

    async def set(
        self, collection: str, doc_id: str, data: Dict[str, Any], merge: bool = False
    ) -> Document:
        """Write a document at a known id, replacing it unless ``merge``."""
        data = ensure_document(data, FIRESTORE_LEAF_TYPES)
        await self._document(collection, doc_id).set(data, merge=merge)
        logger.debug(f"Set document {collection}/{doc_id} (merge={merge})")
        return {"id": doc_id, **data}

    async def update(self, collection: str, doc_id: str, data: Dict[str, Any]) -> Document:
        """
        Merge fields into an existing document.

        Fields not present in ``data`` are left unchanged. Raises the
        backend's NotFound if the document does not exist.
        """
        data = ensure_document(data, FIRESTORE_LEAF_TYPES)
        await self._document(collection, doc_id).update(data)
        logger.debug(f"Updated document {collection}/{doc_id}")
        return {"id": doc_id, **data}

    async def delete(self, collection: str, doc_id: str) -> bool:
        """Delete a document. Deleting a missing document is a no-op."""
        await self._document(collection, doc_id).delete()
        logger.debug(f"Deleted document {collection}/{doc_id}")
        return True

    async def list(self, collection: str) -> List[Document]:
        """Return every document in a collection, each with its id."""
        return [
            {"id": snapshot.id, **(snapshot.to_dict() or {})}
            async for snapshot in self._client.collection(collection).stream()
        ]

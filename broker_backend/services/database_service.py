import logging
from typing import Any, Dict, List, Optional, Tuple

from firebase_admin import firestore
from google.api_core.exceptions import GoogleAPICallError

from broker_backend.core.config import Settings
from broker_backend.core.firebase import get_firebase_app

logger = logging.getLogger(__name__)

# Collection names
NEWS_COLLECTION = "news"
CHATS_COLLECTION = "chats"
ADMINS_COLLECTION = "admins"
USERS_COLLECTION = "users"


class FirestoreService:
    """Small wrapper around the Firestore client of the default Firebase app.

    Documents are addressed by slash-separated paths (``users/{uid}``). Every
    write is a merge write. Failures are logged and re-raised; the callers
    decide whether they are fatal.
    """

    def __init__(self, settings: Settings):
        self.settings = settings
        self.client = firestore.client(app=get_firebase_app(settings))

    # ---- Reads ----------------------------------------------------------------
    def get_document(self, path: str) -> Optional[Dict[str, Any]]:
        """Return the document data, or None when the document does not exist."""
        try:
            snapshot = self.client.document(path).get()
        except GoogleAPICallError:
            logger.exception("Failed to read document %s", path)
            raise
        if not snapshot.exists:
            return None
        return snapshot.to_dict() or {}

    def document_exists(self, path: str) -> bool:
        return self.get_document(path) is not None

    def list_documents(
        self,
        collection: str,
        order_by: str,
        limit: int,
        descending: bool = True,
    ) -> List[Tuple[str, Dict[str, Any]]]:
        """Return up to ``limit`` (id, data) pairs ordered by ``order_by``."""
        direction = firestore.Query.DESCENDING if descending else firestore.Query.ASCENDING
        try:
            query = self.client.collection(collection).order_by(order_by, direction=direction).limit(limit)
            snapshots = list(query.stream())
        except GoogleAPICallError:
            logger.exception("Failed to list documents of %s", collection)
            raise
        logger.debug("Fetched %d documents from %s", len(snapshots), collection)
        return [(s.id, s.to_dict() or {}) for s in snapshots]

    # ---- Writes ---------------------------------------------------------------
    def set_document(self, path: str, data: Dict[str, Any]) -> None:
        try:
            self.client.document(path).set(data, merge=True)
        except GoogleAPICallError:
            logger.exception("Failed to write document %s", path)
            raise
        logger.debug("Merged fields %s into %s", sorted(data), path)

    def create_document(self, collection: str, data: Dict[str, Any]) -> str:
        """Write ``data`` to a new auto-id document and return its id."""
        ref = self.client.collection(collection).document()
        try:
            ref.set(data, merge=True)
        except GoogleAPICallError:
            logger.exception("Failed to create document in %s", collection)
            raise
        logger.info("Created document %s/%s", collection, ref.id)
        return ref.id

import logging
from typing import Any, Dict, Optional

from broker_backend.core.exceptions import ClaimUpdateError
from broker_backend.services.auth_service import FirebaseAuthService
from broker_backend.services.database_service import (
    ADMINS_COLLECTION,
    USERS_COLLECTION,
    FirestoreService,
)

logger = logging.getLogger(__name__)

ADMIN_CLAIM = "admin"


class AdminClaimsService:
    """
    Keeps the ``admin`` custom claim of a Firebase user in line with Firestore.

    A user is an admin when ``admins/{uid}`` exists or ``users/{uid}.isAdmin``
    is true. The claim is present (and true) for admins and absent otherwise;
    it is never set to false. Every operation re-derives and rewrites the
    claim, so repeated or concurrent calls for the same uid converge.
    """

    def __init__(self, auth_service: FirebaseAuthService, firestore_service: FirestoreService):
        self.auth_service = auth_service
        self.firestore_service = firestore_service

    def set_admin_claim(self, uid: str, is_admin: bool) -> None:
        """Grant or revoke the admin claim, keeping every other claim as is.

        The full claims mapping is written back even when nothing changed.

        Raises:
            ClaimUpdateError: reading or writing the user's claims failed.
        """
        try:
            next_claims = dict(self.auth_service.get_custom_claims(uid))
            if is_admin:
                next_claims[ADMIN_CLAIM] = True
            else:
                next_claims.pop(ADMIN_CLAIM, None)
            self.auth_service.set_custom_claims(uid, next_claims)
            logger.info("Updated claims for uid=%s is_admin=%s", uid, is_admin)
        except Exception as e:
            logger.error("Failed to update claims for uid=%s is_admin=%s: %s", uid, is_admin, e)
            raise ClaimUpdateError(uid, is_admin) from e

    def on_admin_doc_created(self, uid: str) -> None:
        self.set_admin_claim(uid, True)

    def on_admin_doc_deleted(self, uid: str) -> None:
        self.set_admin_claim(uid, False)

    def on_user_profile_updated(
        self,
        uid: str,
        before: Optional[Dict[str, Any]],
        after: Optional[Dict[str, Any]],
    ) -> bool:
        """Sync the claim only when ``isAdmin`` flipped. Returns True if a write happened."""
        prev = bool((before or {}).get("isAdmin"))
        next_ = bool((after or {}).get("isAdmin"))
        if prev == next_:
            logger.debug("isAdmin unchanged for uid=%s; skipping claim update", uid)
            return False
        self.set_admin_claim(uid, next_)
        return True

    def resolve_admin_state(self, uid: str) -> bool:
        """Either source alone makes the user an admin."""
        admin_doc_exists = self.firestore_service.document_exists(f"{ADMINS_COLLECTION}/{uid}")
        profile = self.firestore_service.get_document(f"{USERS_COLLECTION}/{uid}") or {}
        return admin_doc_exists or profile.get("isAdmin") is True

    def sync_admin_claims(self, uid: str) -> bool:
        is_admin = self.resolve_admin_state(uid)
        self.set_admin_claim(uid, is_admin)
        return is_admin

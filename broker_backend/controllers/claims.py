import logging

from fastapi import HTTPException, status

from broker_backend.models.user import SyncClaimsResponse
from broker_backend.services.auth_service import FirebaseAuthService
from broker_backend.services.claims_service import AdminClaimsService

logger = logging.getLogger(__name__)


def sync_admin_claims_controller(
    id_token: str,
    auth_service: FirebaseAuthService,
    claims_service: AdminClaimsService,
) -> SyncClaimsResponse:
    # A rejected ID token lands in the generic 500 branch too; the web client
    # only distinguishes "no header" (401) from everything else.
    try:
        user = auth_service.verify_token(id_token)
        is_admin = claims_service.sync_admin_claims(user.uid)
        return SyncClaimsResponse(uid=user.uid, isAdmin=is_admin)
    except Exception:
        logger.exception("Admin claim sync failed")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal Server Error",
        )

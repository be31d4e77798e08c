import logging
from fastapi import APIRouter, Depends

from broker_backend.api.deps import get_auth_service, get_bearer_token, get_claims_service
from broker_backend.controllers.claims import sync_admin_claims_controller
from broker_backend.models.user import SyncClaimsResponse
from broker_backend.services.auth_service import FirebaseAuthService
from broker_backend.services.claims_service import AdminClaimsService

logger = logging.getLogger(__name__)
router = APIRouter()

@router.api_route(
    "/sync-admin-claims",
    methods=["GET", "POST"],
    response_model=SyncClaimsResponse,
    summary="Sync Admin Claim",
)
def sync_admin_claims(
    id_token: str = Depends(get_bearer_token),
    auth_service: FirebaseAuthService = Depends(get_auth_service),
    claims_service: AdminClaimsService = Depends(get_claims_service),
):
    """
    Re-derives the caller's ``admin`` claim from Firestore and writes it back.
    FastAPI runs this synchronous function in a thread pool.
    """
    return sync_admin_claims_controller(id_token, auth_service, claims_service)

import re
import secrets
from typing import AsyncGenerator, Optional

from fastapi import Depends, Header, HTTPException, status
from httpx import AsyncClient

from broker_backend.core.config import get_settings, Settings
from broker_backend.services.auth_service import FirebaseAuthService
from broker_backend.services.chat_notification_service import ChatNotificationService
from broker_backend.services.claims_service import AdminClaimsService
from broker_backend.services.database_service import FirestoreService
from broker_backend.services.email_service import EmailJSService
from broker_backend.services.news_service import NewsService
from broker_backend.services.summary_service import SummaryService
from broker_backend.triggers import TriggerRegistry, build_trigger_registry

_BEARER = re.compile(r"^Bearer\s+(.*)$", re.IGNORECASE)

# HTTP Client Dependency
async def get_http_client() -> AsyncGenerator[AsyncClient, None]:
    async with AsyncClient() as client:
        yield client

# Service Dependencies
def get_firestore_service(settings: Settings = Depends(get_settings)) -> FirestoreService:
    return FirestoreService(settings)

def get_auth_service(settings: Settings = Depends(get_settings)) -> FirebaseAuthService:
    return FirebaseAuthService(settings)

def get_claims_service(
    auth_service: FirebaseAuthService = Depends(get_auth_service),
    firestore_service: FirestoreService = Depends(get_firestore_service),
) -> AdminClaimsService:
    return AdminClaimsService(auth_service, firestore_service)

def get_summary_service(settings: Settings = Depends(get_settings)) -> SummaryService:
    # Holds an initialized model client when OPENAI_API_KEY is set; instantiate per-request
    return SummaryService(settings)

def get_news_service(
    firestore_service: FirestoreService = Depends(get_firestore_service),
    summary_service: SummaryService = Depends(get_summary_service),
) -> NewsService:
    return NewsService(firestore_service, summary_service)

def get_email_service(
    settings: Settings = Depends(get_settings),
    client: AsyncClient = Depends(get_http_client),
) -> EmailJSService:
    return EmailJSService(settings, client)

def get_trigger_registry(
    settings: Settings = Depends(get_settings),
    claims_service: AdminClaimsService = Depends(get_claims_service),
    firestore_service: FirestoreService = Depends(get_firestore_service),
    email_service: EmailJSService = Depends(get_email_service),
) -> TriggerRegistry:
    chat_notification_service = None
    if settings.CHAT_NOTIFICATION_TRIGGER_ENABLED:
        chat_notification_service = ChatNotificationService(settings, firestore_service, email_service)
    return build_trigger_registry(claims_service, chat_notification_service)

# Request Dependencies
def get_bearer_token(authorization: Optional[str] = Header(default=None)) -> str:
    """
    Extracts the ID token from an ``Authorization: Bearer <token>`` header.
    """
    match = _BEARER.match(authorization or "")
    if not match:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing Authorization: Bearer <ID_TOKEN>",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return match.group(1)

def verify_trigger_secret(
    x_trigger_secret: Optional[str] = Header(default=None),
    settings: Settings = Depends(get_settings),
) -> None:
    """
    Guards the event receiver: only the event forwarder knows the shared secret.
    """
    if not settings.TRIGGER_SHARED_SECRET:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Event receiver is not configured",
        )
    expected = settings.TRIGGER_SHARED_SECRET.get_secret_value()
    if not x_trigger_secret or not secrets.compare_digest(x_trigger_secret, expected):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Invalid trigger secret")

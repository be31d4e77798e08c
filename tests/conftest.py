"""
Shared fixtures.

Firebase Authentication and Firestore are replaced by MagicMocks backed by
plain dicts, so tests can assert both on the resulting state and on the calls
that were (or were not) made.
"""

import copy
from typing import Any, Dict
from unittest.mock import MagicMock

import httpx
import pytest
from fastapi.testclient import TestClient

from broker_backend.api.deps import get_auth_service, get_firestore_service, get_http_client
from broker_backend.core.config import Settings, get_settings
from broker_backend.models.user import User
from broker_backend.services.auth_service import FirebaseAuthService
from broker_backend.services.claims_service import AdminClaimsService
from broker_backend.services.database_service import FirestoreService

TRIGGER_SECRET = "test-trigger-secret"


def make_settings(**overrides: Any) -> Settings:
    values: Dict[str, Any] = {
        "OPENAI_API_KEY": None,
        "FIREBASE_SERVICE_ACCOUNT_JSON": None,
        "EMAILJS_PUBLIC_KEY": "",
        "ADMIN_TO": "",
        "EMAIL_NOTIFICATIONS_ENABLED": False,
        "TRIGGER_SHARED_SECRET": TRIGGER_SECRET,
        "CHAT_NOTIFICATION_TRIGGER_ENABLED": False,
        "LOG_RICH": False,
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture
def settings_factory():
    """Build Settings that ignore the developer's .env and environment."""
    return make_settings


@pytest.fixture
def settings() -> Settings:
    return make_settings()


# =============================================================================
# Credential Store (Firebase Authentication)
# =============================================================================

@pytest.fixture
def claims_store() -> Dict[str, Dict[str, Any]]:
    """uid -> custom claims. A missing uid behaves like a user without claims."""
    return {}


@pytest.fixture
def auth_service(claims_store) -> MagicMock:
    service = MagicMock(spec=FirebaseAuthService)
    service.get_custom_claims.side_effect = lambda uid: copy.deepcopy(claims_store.get(uid) or {})

    def set_claims(uid, claims):
        claims_store[uid] = copy.deepcopy(claims)

    service.set_custom_claims.side_effect = set_claims

    def verify(token):
        if not token.startswith("valid-"):
            raise ValueError("Invalid ID token")
        return User(uid=token[len("valid-"):], email="user@example.pt")

    service.verify_token.side_effect = verify
    return service


# =============================================================================
# Document Store (Firestore)
# =============================================================================

@pytest.fixture
def documents() -> Dict[str, Dict[str, Any]]:
    """path -> document data."""
    return {}


@pytest.fixture
def firestore_service(documents) -> MagicMock:
    service = MagicMock(spec=FirestoreService)

    def get_document(path):
        data = documents.get(path)
        return copy.deepcopy(data) if data is not None else None

    def set_document(path, data):
        documents.setdefault(path, {}).update(copy.deepcopy(data))

    counter = {"n": 0}

    def create_document(collection, data):
        counter["n"] += 1
        doc_id = f"doc{counter['n']}"
        documents[f"{collection}/{doc_id}"] = copy.deepcopy(data)
        return doc_id

    service.get_document.side_effect = get_document
    service.document_exists.side_effect = lambda path: path in documents
    service.set_document.side_effect = set_document
    service.create_document.side_effect = create_document
    return service


@pytest.fixture
def claims_service(auth_service, firestore_service) -> AdminClaimsService:
    return AdminClaimsService(auth_service, firestore_service)


# =============================================================================
# HTTP
# =============================================================================

@pytest.fixture
def emailjs_requests() -> list:
    """Requests that reached the fake EmailJS endpoint."""
    return []


@pytest.fixture
def emailjs_response() -> Dict[str, Any]:
    """Mutable status and body returned by the fake EmailJS endpoint."""
    return {"status_code": 200, "text": "OK"}


@pytest.fixture
def emailjs_transport(emailjs_requests, emailjs_response) -> httpx.MockTransport:
    def handler(request: httpx.Request) -> httpx.Response:
        emailjs_requests.append(request)
        return httpx.Response(emailjs_response["status_code"], text=emailjs_response["text"])

    return httpx.MockTransport(handler)


@pytest.fixture
def client(settings, auth_service, firestore_service, emailjs_transport):
    """TestClient with Firebase and EmailJS replaced by fakes."""
    from main import app

    async def http_client_override():
        async with httpx.AsyncClient(transport=emailjs_transport) as http_client:
            yield http_client

    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_auth_service] = lambda: auth_service
    app.dependency_overrides[get_firestore_service] = lambda: firestore_service
    app.dependency_overrides[get_http_client] = http_client_override
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()

import logging
from typing import Any, Dict

from firebase_admin import auth

from broker_backend.core.config import Settings
from broker_backend.core.firebase import get_firebase_app
from broker_backend.models.user import User

logger = logging.getLogger(__name__)

class FirebaseAuthService:
    """Thin wrapper over Firebase Authentication: ID tokens and custom claims."""

    def __init__(self, settings: Settings):
        self.app = get_firebase_app(settings)

    def verify_token(self, token: str) -> User:
        """Verify a Firebase ID token. Errors from the SDK propagate unchanged."""
        decoded_token = auth.verify_id_token(token, app=self.app)
        user_id = decoded_token['uid']
        logger.info(f"Token verified for user: {user_id}")
        return User(uid=user_id, email=decoded_token.get('email'))

    def get_custom_claims(self, uid: str) -> Dict[str, Any]:
        user = auth.get_user(uid, app=self.app)
        return dict(user.custom_claims or {})

    def set_custom_claims(self, uid: str, claims: Dict[str, Any]) -> None:
        auth.set_custom_user_claims(uid, claims, app=self.app)

import logging
from typing import Any, Dict, Optional

from starlette.concurrency import run_in_threadpool

from broker_backend.core.config import Settings
from broker_backend.services.database_service import CHATS_COLLECTION, FirestoreService
from broker_backend.services.email_service import EmailJSService

logger = logging.getLogger(__name__)


class ChatNotificationService:
    """Emails the site admin when a visitor sends the first message of a chat.

    ``chats/{id}.firstNotified`` flips to true after the first attempt, so at
    most one notification goes out per chat. The trigger is dormant unless
    CHAT_NOTIFICATION_TRIGGER_ENABLED is set; the web client notifies instead.
    """

    def __init__(self, settings: Settings, firestore_service: FirestoreService, email_service: EmailJSService):
        self.settings = settings
        self.firestore_service = firestore_service
        self.email_service = email_service

    def build_payload(self, chat: Dict[str, Any], text: str) -> Dict[str, Any]:
        name = chat.get("name") or "(anónimo)"
        inbox_url = f"{self.settings.SITE_BASE_URL}/pt/admin/inbox"
        return {
            "service_id": self.settings.EMAILJS_SERVICE_ID,
            "template_id": self.settings.EMAILJS_TEMPLATE_ID,
            "user_id": self.settings.EMAILJS_PUBLIC_KEY,
            "template_params": {
                # Template uses {{name}} in subject and body, {{message}} for content
                "to_email": self.settings.ADMIN_TO,
                "name": name,
                "email": chat.get("email") or "(sem email)",
                "phone": chat.get("phone") or "(sem telefone)",
                "subject": f"Novo chat iniciado - {name}",
                "message": f"Primeira mensagem: {text}\n\nAbrir inbox: {inbox_url}",
            },
        }

    async def notify_on_first_user_message(self, chat_id: str, message: Optional[Dict[str, Any]]) -> bool:
        """Returns True when the chat was marked as notified by this call."""
        if not message or message.get("authorRole") != "user":
            return False

        chat_path = f"{CHATS_COLLECTION}/{chat_id}"
        chat = await run_in_threadpool(self.firestore_service.get_document, chat_path)
        if chat is None:
            logger.debug("Chat %s not found; nothing to notify", chat_id)
            return False
        if chat.get("firstNotified"):
            return False

        if not self.email_service.notifications_configured:
            logger.info(
                "EmailJS disabled or missing configuration; skipping send for chat %s (enabled=%s)",
                chat_id,
                self.settings.EMAIL_NOTIFICATIONS_ENABLED,
            )
        else:
            result = await self.email_service.send(self.build_payload(chat, str(message.get("text") or "")))
            if result.ok:
                logger.info("EmailJS send OK for chat %s", chat_id)
            else:
                logger.error("EmailJS send error for chat %s: %s", chat_id, result.error.message)

        await run_in_threadpool(self.firestore_service.set_document, chat_path, {"firstNotified": True})
        return True

"""
Tests for the dormant first-chat-message notifier.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from broker_backend.models.email import SendError, SendResult
from broker_backend.services.chat_notification_service import ChatNotificationService
from broker_backend.services.email_service import EmailJSService

ENABLED = {
    "EMAIL_NOTIFICATIONS_ENABLED": True,
    "ADMIN_TO": "admin@ansiao.pt",
    "EMAILJS_PUBLIC_KEY": "public-key",
    "SITE_BASE_URL": "https://ansiao.pt",
}


@pytest.fixture
def make_notifier(settings_factory, firestore_service):
    def factory(send_result=None, **overrides):
        settings = settings_factory(**overrides)
        email_service = EmailJSService(settings, client=MagicMock())
        email_service.send = AsyncMock(return_value=send_result or SendResult(ok=True))
        return ChatNotificationService(settings, firestore_service, email_service), email_service

    return factory


class TestNotifyOnFirstUserMessage:

    @pytest.mark.asyncio
    async def test_first_user_message_sends_and_marks_chat(self, make_notifier, documents):
        documents["chats/c1"] = {"name": "Ana", "email": "ana@x.pt", "firstNotified": False}
        notifier, email_service = make_notifier(**ENABLED)

        marked = await notifier.notify_on_first_user_message("c1", {"authorRole": "user", "text": "Olá"})

        assert marked is True
        assert documents["chats/c1"]["firstNotified"] is True
        payload = email_service.send.await_args.args[0]
        params = payload["template_params"]
        assert payload["user_id"] == "public-key"
        assert params["to_email"] == "admin@ansiao.pt"
        assert params["name"] == "Ana"
        assert params["phone"] == "(sem telefone)"
        assert params["message"] == "Primeira mensagem: Olá\n\nAbrir inbox: https://ansiao.pt/pt/admin/inbox"

    @pytest.mark.asyncio
    async def test_already_notified_chat_is_left_alone(self, make_notifier, documents, firestore_service):
        documents["chats/c1"] = {"name": "Ana", "firstNotified": True}
        notifier, email_service = make_notifier(**ENABLED)

        assert await notifier.notify_on_first_user_message("c1", {"authorRole": "user", "text": "Outra"}) is False
        email_service.send.assert_not_awaited()
        firestore_service.set_document.assert_not_called()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("message", [None, {"authorRole": "admin", "text": "Bom dia"}, {"text": "sem papel"}])
    async def test_non_user_messages_are_ignored(self, make_notifier, documents, firestore_service, message):
        documents["chats/c1"] = {"name": "Ana"}
        notifier, _ = make_notifier(**ENABLED)

        assert await notifier.notify_on_first_user_message("c1", message) is False
        firestore_service.get_document.assert_not_called()

    @pytest.mark.asyncio
    async def test_missing_chat(self, make_notifier, firestore_service):
        notifier, email_service = make_notifier(**ENABLED)

        assert await notifier.notify_on_first_user_message("nope", {"authorRole": "user"}) is False
        email_service.send.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_disabled_notifications_still_mark_chat(self, make_notifier, documents):
        documents["chats/c1"] = {}
        notifier, email_service = make_notifier(**{**ENABLED, "EMAIL_NOTIFICATIONS_ENABLED": False})

        assert await notifier.notify_on_first_user_message("c1", {"authorRole": "user", "text": "Olá"}) is True
        email_service.send.assert_not_awaited()
        assert documents["chats/c1"]["firstNotified"] is True

    @pytest.mark.asyncio
    async def test_failed_send_is_logged_and_chat_marked(self, make_notifier, documents, caplog):
        documents["chats/c1"] = {}
        failure = SendResult(ok=False, error=SendError(status_code=412, message="EmailJS send failed: 412"))
        notifier, _ = make_notifier(send_result=failure, **ENABLED)

        assert await notifier.notify_on_first_user_message("c1", {"authorRole": "user", "text": "Olá"}) is True
        assert documents["chats/c1"]["firstNotified"] is True
        assert "EmailJS send failed: 412" in caplog.text

    def test_anonymous_defaults(self, make_notifier):
        notifier, _ = make_notifier(**ENABLED)

        params = notifier.build_payload({}, "Olá")["template_params"]

        assert params["name"] == "(anónimo)"
        assert params["email"] == "(sem email)"
        assert params["subject"] == "Novo chat iniciado - (anónimo)"

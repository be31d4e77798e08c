"""Explicit wiring of Firestore document events to their handlers.

Each trigger pairs an event type with a document path pattern such as
``admins/{uid}``; the ``{name}`` segments are passed to the handler as params.
"""

import logging
import re
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, List, Optional, Tuple

from starlette.concurrency import run_in_threadpool

from broker_backend.models.events import DocumentEvent, DocumentEventType
from broker_backend.services.chat_notification_service import ChatNotificationService
from broker_backend.services.claims_service import AdminClaimsService

logger = logging.getLogger(__name__)

Handler = Callable[[DocumentEvent, Dict[str, str]], Awaitable[Any]]

_PARAM = re.compile(r"\{(\w+)\}")


def compile_pattern(pattern: str) -> "re.Pattern[str]":
    parts = []
    for segment in pattern.strip("/").split("/"):
        match = _PARAM.fullmatch(segment)
        parts.append(f"(?P<{match.group(1)}>[^/]+)" if match else re.escape(segment))
    return re.compile("^" + "/".join(parts) + "$")


@dataclass
class Trigger:
    name: str
    event_type: DocumentEventType
    pattern: str
    handler: Handler

    def __post_init__(self):
        self._regex = compile_pattern(self.pattern)

    def match(self, event_type: DocumentEventType, document: str) -> Optional[Dict[str, str]]:
        if event_type != self.event_type:
            return None
        m = self._regex.match(document.strip("/"))
        return m.groupdict() if m else None


class TriggerRegistry:
    def __init__(self):
        self.triggers: List[Trigger] = []

    def register(self, event_type: DocumentEventType, pattern: str, handler: Handler, name: str) -> None:
        self.triggers.append(Trigger(name=name, event_type=event_type, pattern=pattern, handler=handler))
        logger.debug("Registered trigger %s on %s %s", name, event_type.value, pattern)

    def match(self, event_type: DocumentEventType, document: str) -> Optional[Tuple[Trigger, Dict[str, str]]]:
        for trigger in self.triggers:
            params = trigger.match(event_type, document)
            if params is not None:
                return trigger, params
        return None

    async def dispatch(self, event: DocumentEvent) -> Optional[str]:
        """Run the handler for ``event``. Returns the trigger name, or None if unmatched."""
        found = self.match(event.event_type, event.document)
        if found is None:
            logger.info("No trigger for %s %s", event.event_type.value, event.document)
            return None
        trigger, params = found
        logger.info("Dispatching %s %s to %s", event.event_type.value, event.document, trigger.name)
        await trigger.handler(event, params)
        return trigger.name


def build_trigger_registry(
    claims_service: AdminClaimsService,
    chat_notification_service: Optional[ChatNotificationService] = None,
) -> TriggerRegistry:
    """Default wiring. The chat notifier is only wired when a service is passed in."""
    registry = TriggerRegistry()

    async def on_admin_doc_created(event: DocumentEvent, params: Dict[str, str]) -> None:
        await run_in_threadpool(claims_service.on_admin_doc_created, params["uid"])

    async def on_admin_doc_deleted(event: DocumentEvent, params: Dict[str, str]) -> None:
        await run_in_threadpool(claims_service.on_admin_doc_deleted, params["uid"])

    async def on_user_is_admin_updated(event: DocumentEvent, params: Dict[str, str]) -> None:
        await run_in_threadpool(claims_service.on_user_profile_updated, params["uid"], event.before, event.after)

    registry.register(DocumentEventType.CREATED, "admins/{uid}", on_admin_doc_created, "onAdminDocCreated")
    registry.register(DocumentEventType.DELETED, "admins/{uid}", on_admin_doc_deleted, "onAdminDocDeleted")
    registry.register(DocumentEventType.UPDATED, "users/{uid}", on_user_is_admin_updated, "onUserIsAdminUpdated")

    if chat_notification_service is not None:
        async def notify_on_first_user_message(event: DocumentEvent, params: Dict[str, str]) -> None:
            await chat_notification_service.notify_on_first_user_message(params["chatId"], event.after)

        registry.register(
            DocumentEventType.CREATED,
            "chats/{chatId}/messages/{messageId}",
            notify_on_first_user_message,
            "notifyOnFirstUserMessage",
        )

    return registry

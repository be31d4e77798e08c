import logging
from typing import Any, Dict

from httpx import AsyncClient, HTTPError, Response

from broker_backend.core.config import Settings
from broker_backend.models.email import SendError, SendResult

logger = logging.getLogger(__name__)


class EmailJSService:
    """Sends EmailJS payloads through the EmailJS REST API (single attempt, no retry)."""

    def __init__(self, settings: Settings, client: AsyncClient):
        self.settings = settings
        self.client = client

    @property
    def notifications_configured(self) -> bool:
        s = self.settings
        return bool(
            s.EMAIL_NOTIFICATIONS_ENABLED
            and s.ADMIN_TO
            and s.EMAILJS_SERVICE_ID
            and s.EMAILJS_TEMPLATE_ID
            and s.EMAILJS_PUBLIC_KEY
        )

    async def forward(self, payload: Dict[str, Any]) -> Response:
        """POST the payload as-is and hand back the upstream response."""
        logger.debug("Forwarding EmailJS payload for template %s", payload.get("template_id"))
        return await self.client.post(
            self.settings.EMAILJS_API_URL,
            json=payload,
            headers={"Content-Type": "application/json"},
        )

    async def send(self, payload: Dict[str, Any]) -> SendResult:
        try:
            resp = await self.forward(payload)
        except HTTPError as e:
            return SendResult(ok=False, error=SendError(message=f"EmailJS request failed: {e}"))
        if not resp.is_success:
            return SendResult(
                ok=False,
                error=SendError(
                    status_code=resp.status_code,
                    message=f"EmailJS send failed: {resp.status_code} {resp.reason_phrase} {resp.text}".strip(),
                ),
            )
        return SendResult(ok=True)

import logging

from fastapi import HTTPException, status
from fastapi.responses import JSONResponse, PlainTextResponse, Response
from httpx import HTTPError

from broker_backend.models.email import ContactEmailRequest
from broker_backend.services.email_service import EmailJSService

logger = logging.getLogger(__name__)


async def send_contact_email_controller(request: ContactEmailRequest, email_service: EmailJSService) -> Response:
    """
    Sends the contact form through EmailJS from the server, where the EmailJS
    domain restrictions that break browser sends do not apply.
    """
    try:
        upstream = await email_service.forward(request.model_dump())
    except HTTPError:
        logger.exception("EmailJS request failed")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal Server Error",
        )

    if not upstream.is_success:
        logger.error(
            "EmailJS error: status=%s status_text=%s body=%s",
            upstream.status_code,
            upstream.reason_phrase,
            upstream.text,
        )
        return PlainTextResponse(upstream.text or upstream.reason_phrase, status_code=upstream.status_code)

    return JSONResponse({"ok": True})

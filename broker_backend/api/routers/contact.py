from fastapi import APIRouter, Depends

from broker_backend.api.deps import get_email_service
from broker_backend.controllers.contact import send_contact_email_controller
from broker_backend.models.email import ContactEmailRequest
from broker_backend.services.email_service import EmailJSService

router = APIRouter()

@router.post("/send-contact-email", summary="Send contact email via EmailJS")
async def send_contact_email(
    request: ContactEmailRequest,
    email_service: EmailJSService = Depends(get_email_service),
):
    """Forwards the payload to EmailJS and relays a failed upstream status verbatim."""
    return await send_contact_email_controller(request, email_service)

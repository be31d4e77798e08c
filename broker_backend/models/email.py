from typing import Any, Dict, Optional

from pydantic import BaseModel, Field

class ContactEmailRequest(BaseModel):
    """
    EmailJS send payload, forwarded verbatim by the contact proxy.
    """
    service_id: str = Field(..., min_length=1)
    template_id: str = Field(..., min_length=1)
    user_id: str = Field(..., min_length=1)
    template_params: Dict[str, Any]


class SendError(BaseModel):
    status_code: Optional[int] = None
    message: str


class SendResult(BaseModel):
    """
    Outcome of a best-effort email send. Callers log failures and move on.
    """
    ok: bool
    error: Optional[SendError] = None

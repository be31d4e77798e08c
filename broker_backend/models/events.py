from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field

class DocumentEventType(str, Enum):
    CREATED = "created"
    UPDATED = "updated"
    DELETED = "deleted"


class DocumentEvent(BaseModel):
    """
    A Firestore document change, as posted by the event forwarder.
    """
    event_type: DocumentEventType
    document: str = Field(..., min_length=1, description="Slash-separated document path, e.g. admins/{uid}.")
    before: Optional[Dict[str, Any]] = None
    after: Optional[Dict[str, Any]] = None


class EventDispatchResponse(BaseModel):
    ok: bool = True
    handled: bool
    trigger: Optional[str] = None

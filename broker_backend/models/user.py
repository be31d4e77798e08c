from typing import Optional

from pydantic import BaseModel

class User(BaseModel):
    """
    Represents a user authenticated via Firebase.
    """
    uid: str
    email: Optional[str] = None


class SyncClaimsResponse(BaseModel):
    """
    Response of the admin claim synchronization endpoint.
    """
    ok: bool = True
    uid: str
    isAdmin: bool

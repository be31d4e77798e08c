from pydantic import BaseModel, Field, field_validator
from typing import List, Optional

DEFAULT_REGION = "nacional"

class NewsUpsertRequest(BaseModel):
    title: str = Field(..., min_length=1)
    url: str = Field(..., min_length=1)
    source: str = Field(..., min_length=1)
    region: Optional[str] = DEFAULT_REGION

    @field_validator("region", mode="before")
    @classmethod
    def default_region(cls, value):
        return value or DEFAULT_REGION


class NewsUpsertResponse(BaseModel):
    ok: bool = True
    id: str
    summary: str


class NewsDocument(BaseModel):
    """
    Shape of a document in the ``news`` collection.
    """
    title: str
    url: str
    source: str
    region: str
    summary: str = ""
    publishedAt: str
    tags: Optional[List[str]] = None

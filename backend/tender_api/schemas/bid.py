from datetime import datetime
from typing import Optional, Literal
from uuid import UUID

from pydantic import Field, field_validator

from tender_api.schemas.common import CamelModel, not_null

BidStatusLiteral = Literal["Created", "Published", "Canceled", "Approved", "Rejected"]


class BidCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: str = Field(..., max_length=500)
    status: BidStatusLiteral = "Created"
    tender_id: UUID
    organization_id: UUID
    creator_username: str


class BidPatch(CamelModel):
    """Partial update of a bid's name and/or description."""
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=500)

    class Config:
        extra = "forbid"

    @field_validator("name", "description")
    @classmethod
    def reject_null(cls, v):
        return not_null(v)


class BidResponse(CamelModel):
    id: UUID
    name: str
    description: Optional[str] = None
    status: str
    tender_id: UUID
    author_type: str
    author_id: UUID
    version: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class BidFeedbackResponse(CamelModel):
    id: UUID
    bid_id: UUID
    feedback: str
    created_at: Optional[datetime] = None

from datetime import datetime
from typing import Optional, Literal
from uuid import UUID

from pydantic import Field, field_validator

from tender_api.schemas.common import CamelModel, not_null

ServiceTypeLiteral = Literal["Construction", "Delivery", "Manufacture"]
TenderStatusLiteral = Literal["Created", "Published", "Closed"]


class TenderCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: str = Field(..., max_length=500)
    service_type: ServiceTypeLiteral
    status: TenderStatusLiteral = "Created"
    organization_id: UUID
    creator_username: str


class TenderPatch(CamelModel):
    """Partial update of the versioned fields; an absent key leaves the field unchanged."""
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=500)
    service_type: Optional[ServiceTypeLiteral] = None

    class Config:
        extra = "forbid"

    @field_validator("name", "description", "service_type")
    @classmethod
    def reject_null(cls, v):
        return not_null(v)


class TenderResponse(CamelModel):
    id: UUID
    name: str
    description: Optional[str] = None
    service_type: Optional[str] = None
    status: str
    organization_id: UUID
    version: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

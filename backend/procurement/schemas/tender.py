from datetime import datetime
from typing import Optional, Literal
from uuid import UUID

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel

ServiceType = Literal["Construction", "Delivery", "Manufacture"]


class CamelModel(BaseModel):
    """JSON field names are camelCase on the wire, snake_case in Python."""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True


class TenderBase(CamelModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: str = Field(..., min_length=1, max_length=500)
    service_type: ServiceType


class TenderCreate(TenderBase):
    organization_id: UUID
    creator_username: str = Field(..., min_length=1)


class TenderEdit(CamelModel):
    # Empty string means "keep the current value".
    name: Optional[str] = Field(None, max_length=100)
    description: Optional[str] = Field(None, max_length=500)
    service_type: Optional[Literal["Construction", "Delivery", "Manufacture", ""]] = None


class TenderResponse(TenderBase):
    id: UUID
    status: str
    organization_id: UUID
    version: int
    created_at: Optional[datetime] = None


class TenderHistoryResponse(CamelModel):
    id: UUID
    version: int
    name: str
    description: str
    service_type: str
    status: str
    organization_id: UUID
    archived_at: Optional[datetime] = None

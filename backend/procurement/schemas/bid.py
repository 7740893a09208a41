from datetime import datetime
from typing import Optional, Literal
from uuid import UUID

from pydantic import Field

from procurement.schemas.tender import CamelModel


class BidBase(CamelModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: str = Field(..., min_length=1, max_length=500)
    tender_id: UUID
    author_type: Literal["User", "Organization"]
    author_id: UUID


class BidCreate(BidBase):
    pass


class BidEdit(CamelModel):
    name: Optional[str] = Field(None, max_length=100)
    description: Optional[str] = Field(None, max_length=500)


class BidResponse(BidBase):
    id: UUID
    status: str
    version: int
    created_at: Optional[datetime] = None


class BidHistoryResponse(CamelModel):
    id: UUID
    version: int
    name: str
    description: str
    status: str
    tender_id: UUID
    author_type: str
    author_id: UUID
    archived_at: Optional[datetime] = None


class ReviewResponse(CamelModel):
    id: UUID
    description: str
    created_at: Optional[datetime] = None

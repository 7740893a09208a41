import uuid

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Uuid
from sqlalchemy.sql import func

from procurement.models.base import Base


class BidStatus:
    CREATED = "Created"
    PUBLISHED = "Published"
    CANCELED = "Canceled"

    ALL = (CREATED, PUBLISHED, CANCELED)


class BidAuthorType:
    USER = "User"
    ORGANIZATION = "Organization"

    ALL = (USER, ORGANIZATION)


class BidDecision:
    APPROVED = "Approved"
    REJECTED = "Rejected"

    ALL = (APPROVED, REJECTED)


BID_VERSIONED_FIELDS = ("name", "description", "status", "tender_id", "author_type", "author_id")


class Bid(Base):
    __tablename__ = "bid"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(100), unique=True, nullable=False)
    description = Column(String(500), nullable=False)
    status = Column(String(50), default=BidStatus.CREATED, nullable=False)
    tender_id = Column(Uuid, ForeignKey("tender.id"), nullable=False, index=True)
    author_type = Column(String(20), nullable=False)  # "User" | "Organization"
    author_id = Column(Uuid, nullable=False, index=True)  # employee.id or organization.id, per author_type
    version = Column(Integer, default=1, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Decision counters, outside the version history.
    approvals = Column(Integer, default=0, nullable=False)
    rejections = Column(Integer, default=0, nullable=False)


class BidHistory(Base):
    """Snapshot of a bid as it was at ``version``."""
    __tablename__ = "bid_history"

    id = Column(Uuid, ForeignKey("bid.id"), primary_key=True)
    version = Column(Integer, primary_key=True)
    name = Column(String(100), nullable=False)
    description = Column(String(500), nullable=False)
    status = Column(String(50), nullable=False)
    tender_id = Column(Uuid, nullable=False)
    author_type = Column(String(20), nullable=False)
    author_id = Column(Uuid, nullable=False)
    archived_at = Column(DateTime(timezone=True), server_default=func.now())

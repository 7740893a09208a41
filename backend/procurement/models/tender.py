import uuid

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Uuid
from sqlalchemy.sql import func

from procurement.models.base import Base


class TenderStatus:
    CREATED = "Created"
    PUBLISHED = "Published"
    CLOSED = "Closed"

    ALL = (CREATED, PUBLISHED, CLOSED)


class TenderServiceType:
    CONSTRUCTION = "Construction"
    DELIVERY = "Delivery"
    MANUFACTURE = "Manufacture"

    ALL = (CONSTRUCTION, DELIVERY, MANUFACTURE)


# Attributes captured by a history snapshot and restored by a rollback.
TENDER_VERSIONED_FIELDS = ("name", "description", "service_type", "status", "organization_id")


class Tender(Base):
    __tablename__ = "tender"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(100), unique=True, nullable=False)
    description = Column(String(500), nullable=False)
    service_type = Column(String(50), nullable=False)
    status = Column(String(50), default=TenderStatus.CREATED, nullable=False)
    organization_id = Column(Uuid, ForeignKey("organization.id"), nullable=False, index=True)
    creator_id = Column(Uuid, ForeignKey("employee.id"), nullable=False, index=True)
    version = Column(Integer, default=1, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())


class TenderHistory(Base):
    """Snapshot of a tender as it was at ``version``, archived before it was overwritten."""
    __tablename__ = "tender_history"

    id = Column(Uuid, ForeignKey("tender.id"), primary_key=True)
    version = Column(Integer, primary_key=True)
    name = Column(String(100), nullable=False)
    description = Column(String(500), nullable=False)
    service_type = Column(String(50), nullable=False)
    status = Column(String(50), nullable=False)
    organization_id = Column(Uuid, nullable=False)
    archived_at = Column(DateTime(timezone=True), server_default=func.now())

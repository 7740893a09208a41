import uuid

from sqlalchemy import Column, String, DateTime, ForeignKey, Uuid
from sqlalchemy.sql import func

from procurement.models.base import Base


class BidDecisionEvent(Base):
    """Audit trail: who approved or rejected a bid and when."""
    __tablename__ = "bid_decisions"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    bid_id = Column(Uuid, ForeignKey("bid.id", ondelete="CASCADE"), nullable=False, index=True)
    decision = Column(String(20), nullable=False)  # Approved | Rejected
    actor_id = Column(Uuid, ForeignKey("employee.id"), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

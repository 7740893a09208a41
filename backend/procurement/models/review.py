import uuid

from sqlalchemy import Column, String, DateTime, ForeignKey, Uuid
from sqlalchemy.sql import func

from procurement.models.base import Base


class Review(Base):
    """Feedback left on a bid by a tender-side representative. Append-only."""
    __tablename__ = "review"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    bid_id = Column(Uuid, ForeignKey("bid.id", ondelete="CASCADE"), nullable=False, index=True)
    description = Column(String(1000), nullable=False)
    reviewer_id = Column(Uuid, ForeignKey("employee.id"), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

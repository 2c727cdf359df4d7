import uuid

from sqlalchemy import Column, String, DateTime, ForeignKey, Uuid
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from tender_api.models.base import Base


class BidFeedback(Base):
    """Review note left on a bid by the tender owner. Append-only."""
    __tablename__ = "bid_feedbacks"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    bid_id = Column(Uuid, ForeignKey("bids.id", ondelete="CASCADE"), nullable=False, index=True)
    feedback = Column(String(1000), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    bid = relationship("Bid", back_populates="feedback")

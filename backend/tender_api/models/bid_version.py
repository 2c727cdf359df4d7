import uuid

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, UniqueConstraint, Uuid
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from tender_api.models.base import Base


class BidVersion(Base):
    """Snapshot of a bid's name and description at one version."""
    __tablename__ = "bid_versions"
    __table_args__ = (UniqueConstraint("bid_id", "version", name="uq_bid_version"),)

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    bid_id = Column(Uuid, ForeignKey("bids.id", ondelete="CASCADE"), nullable=False, index=True)
    version = Column(Integer, nullable=False)
    name = Column(String(100), nullable=False)
    description = Column(String(500), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    bid = relationship("Bid", back_populates="versions")

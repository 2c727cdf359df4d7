import uuid

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Uuid
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from tender_api.models.base import Base


class BidStatus:
    CREATED = "Created"
    PUBLISHED = "Published"
    CANCELED = "Canceled"
    APPROVED = "Approved"
    REJECTED = "Rejected"

    ALL = (CREATED, PUBLISHED, CANCELED, APPROVED, REJECTED)


class BidDecision:
    APPROVED = "Approved"
    REJECTED = "Rejected"

    ALL = (APPROVED, REJECTED)


class BidAuthorType:
    ORGANIZATION = "Organization"
    USER = "User"


class Bid(Base):
    __tablename__ = "bids"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(100), nullable=False, index=True)
    description = Column(String(500), nullable=True)
    status = Column(String(20), default=BidStatus.CREATED, nullable=False)
    tender_id = Column(Uuid, ForeignKey("tenders.id"), nullable=False, index=True)
    author_type = Column(String(20), default=BidAuthorType.ORGANIZATION, nullable=False)
    author_id = Column(Uuid, nullable=False, index=True)  # organization or user id, see author_type
    version = Column(Integer, default=1, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    tender = relationship("Tender", back_populates="bids")
    versions = relationship("BidVersion", back_populates="bid", order_by="BidVersion.version")
    feedback = relationship("BidFeedback", back_populates="bid", order_by="BidFeedback.created_at")

import uuid

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Uuid
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from tender_api.models.base import Base


class TenderStatus:
    CREATED = "Created"
    PUBLISHED = "Published"
    CLOSED = "Closed"

    ALL = (CREATED, PUBLISHED, CLOSED)


class Tender(Base):
    __tablename__ = "tenders"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(100), nullable=False, index=True)
    description = Column(String(500), nullable=True)
    service_type = Column(String(20), nullable=True, index=True)
    status = Column(String(20), default=TenderStatus.CREATED, nullable=False, index=True)
    organization_id = Column(Uuid, ForeignKey("organizations.id"), nullable=False, index=True)
    version = Column(Integer, default=1, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    organization = relationship("Organization", back_populates="tenders")
    bids = relationship("Bid", back_populates="tender")
    versions = relationship("TenderVersion", back_populates="tender", order_by="TenderVersion.version")

import uuid

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, UniqueConstraint, Uuid
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from tender_api.models.base import Base


class TenderVersion(Base):
    """Snapshot of a tender's versioned fields. Written once, never updated."""
    __tablename__ = "tender_versions"
    __table_args__ = (UniqueConstraint("tender_id", "version", name="uq_tender_version"),)

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    tender_id = Column(Uuid, ForeignKey("tenders.id", ondelete="CASCADE"), nullable=False, index=True)
    version = Column(Integer, nullable=False)
    name = Column(String(100), nullable=False)
    description = Column(String(500), nullable=True)
    service_type = Column(String(20), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    tender = relationship("Tender", back_populates="versions")

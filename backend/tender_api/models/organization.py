import uuid

from sqlalchemy import Column, String, Text, DateTime, ForeignKey, UniqueConstraint, Uuid
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from tender_api.models.base import Base


class OrganizationType:
    IE = "IE"
    LLC = "LLC"
    JSC = "JSC"


class Organization(Base):
    __tablename__ = "organizations"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(100), nullable=False, index=True)
    description = Column(Text, nullable=True)
    type = Column(String(10), nullable=True)  # OrganizationType
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    responsibles = relationship("OrganizationResponsible", back_populates="organization")
    tenders = relationship("Tender", back_populates="organization")


class OrganizationResponsible(Base):
    """Membership: the user may act on behalf of the organization."""
    __tablename__ = "organization_responsibles"
    __table_args__ = (UniqueConstraint("organization_id", "user_id", name="uq_organization_responsible"),)

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    organization_id = Column(Uuid, ForeignKey("organizations.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    organization = relationship("Organization", back_populates="responsibles")
    user = relationship("User", back_populates="responsibilities")

"""
Tender lifecycle: creation, published listing, status and versioned edits.

Every operation checks, in this order: caller identity, tender existence,
responsibility for the tender's organization, then input validity.
"""
import logging
from typing import Any
from uuid import UUID

from pydantic import ValidationError
from sqlalchemy.orm import Session

from tender_api.models.tender import Tender, TenderStatus
from tender_api.schemas.common import describe_errors
from tender_api.schemas.tender import TenderCreate, TenderPatch
from tender_api.services.access import ensure_responsible, resolve_user, responsible_organizations
from tender_api.services.exceptions import InvalidInputError, NotFoundError
from tender_api.services.pagination import Page
from tender_api.services.versioning import atomic, tender_store

logger = logging.getLogger(__name__)


def get_tender_or_404(db: Session, tender_id: UUID) -> Tender:
    tender = db.query(Tender).filter(Tender.id == tender_id).first()
    if not tender:
        raise NotFoundError("Tender not found")
    return tender


def create_tender(db: Session, payload: TenderCreate) -> Tender:
    user = resolve_user(db, payload.creator_username)
    ensure_responsible(db, user, payload.organization_id)
    tender = Tender(
        name=payload.name,
        description=payload.description,
        service_type=payload.service_type,
        status=payload.status,
        organization_id=payload.organization_id,
    )
    return tender_store.create(db, tender)


def list_published(db: Session, service_types: list[str] | None, page: Page) -> list[Tender]:
    """Published tenders only, optionally restricted to some service types, by name."""
    query = db.query(Tender).filter(Tender.status == TenderStatus.PUBLISHED)
    if service_types:
        query = query.filter(Tender.service_type.in_(service_types))
    return query.order_by(Tender.name.asc()).limit(page.limit).offset(page.offset).all()


def list_for_user(db: Session, username: str | None, page: Page) -> list[Tender]:
    """Tenders of every organization the user is responsible for."""
    user = resolve_user(db, username)
    return (
        db.query(Tender)
        .filter(Tender.organization_id.in_(responsible_organizations(user.id)))
        .order_by(Tender.name.asc())
        .limit(page.limit)
        .offset(page.offset)
        .all()
    )


def get_status(db: Session, tender_id: UUID, username: str | None) -> str:
    resolve_user(db, username)
    return get_tender_or_404(db, tender_id).status


def set_status(db: Session, tender_id: UUID, username: str | None, status: str | None) -> Tender:
    # Any valid status may be set from any other one; there is no transition table.
    user = resolve_user(db, username)
    tender = get_tender_or_404(db, tender_id)
    ensure_responsible(db, user, tender.organization_id)
    if status not in TenderStatus.ALL:
        raise InvalidInputError(f"Invalid tender status, expected one of: {', '.join(TenderStatus.ALL)}")
    with atomic(db, f"set status of tender {tender.id}"):
        tender.status = status
    db.refresh(tender)
    logger.info("tender %s status set to %s by %s", tender.id, status, user.username)
    return tender


def edit_tender(db: Session, tender_id: UUID, username: str | None, body: dict[str, Any]) -> Tender:
    user = resolve_user(db, username)
    tender = get_tender_or_404(db, tender_id)
    ensure_responsible(db, user, tender.organization_id)
    try:
        patch = TenderPatch.model_validate(body)
    except ValidationError as e:
        raise InvalidInputError(describe_errors(e.errors())) from e
    return tender_store.edit(db, tender, patch)


def rollback_tender(db: Session, tender_id: UUID, username: str | None, version: int) -> Tender:
    user = resolve_user(db, username)
    tender = get_tender_or_404(db, tender_id)
    ensure_responsible(db, user, tender.organization_id)
    return tender_store.rollback(db, tender, version)

"""
Bid lifecycle: submission, versioned edits, status, and the tender owner's
decision and feedback workflow.

Edits and status changes belong to the bid's author. Decisions, feedback
and reviews belong to the responsibles of the parent tender's organization.
"""
import logging
from typing import Any
from uuid import UUID

from pydantic import ValidationError
from sqlalchemy.orm import Session

from tender_api.models.bid import Bid, BidAuthorType, BidDecision, BidStatus
from tender_api.models.bid_feedback import BidFeedback
from tender_api.models.tender import TenderStatus
from tender_api.models.user import User
from tender_api.schemas.bid import BidCreate, BidPatch
from tender_api.schemas.common import describe_errors
from tender_api.services.access import (
    ensure_bid_author,
    ensure_responsible,
    resolve_user,
    responsible_organizations,
)
from tender_api.services.exceptions import InvalidInputError, NotFoundError
from tender_api.services.pagination import Page
from tender_api.services.tender_service import get_tender_or_404
from tender_api.services.versioning import atomic, bid_store

logger = logging.getLogger(__name__)

MAX_FEEDBACK_LEN = 1000


def get_bid_or_404(db: Session, bid_id: UUID) -> Bid:
    bid = db.query(Bid).filter(Bid.id == bid_id).first()
    if not bid:
        raise NotFoundError("Bid not found")
    return bid


def _authored_by(user: User):
    """Filter for bids written by the user or by an organization the user is responsible for."""
    return (
        ((Bid.author_type == BidAuthorType.ORGANIZATION) & Bid.author_id.in_(responsible_organizations(user.id)))
        | ((Bid.author_type == BidAuthorType.USER) & (Bid.author_id == user.id))
    )


def create_bid(db: Session, payload: BidCreate) -> Bid:
    user = resolve_user(db, payload.creator_username)
    tender = get_tender_or_404(db, payload.tender_id)
    ensure_responsible(db, user, payload.organization_id)
    bid = Bid(
        name=payload.name,
        description=payload.description,
        status=payload.status,
        tender_id=tender.id,
        author_type=BidAuthorType.ORGANIZATION,
        author_id=payload.organization_id,
    )
    return bid_store.create(db, bid)


def list_for_user(db: Session, username: str | None, page: Page) -> list[Bid]:
    user = resolve_user(db, username)
    return (
        db.query(Bid)
        .filter(_authored_by(user))
        .order_by(Bid.name.asc())
        .limit(page.limit)
        .offset(page.offset)
        .all()
    )


def list_for_tender(db: Session, tender_id: UUID, username: str | None, page: Page) -> list[Bid]:
    user = resolve_user(db, username)
    tender = get_tender_or_404(db, tender_id)
    ensure_responsible(db, user, tender.organization_id)
    return (
        db.query(Bid)
        .filter(Bid.tender_id == tender.id)
        .order_by(Bid.name.asc())
        .limit(page.limit)
        .offset(page.offset)
        .all()
    )


def get_status(db: Session, bid_id: UUID, username: str | None) -> str:
    resolve_user(db, username)
    return get_bid_or_404(db, bid_id).status


def set_status(db: Session, bid_id: UUID, username: str | None, status: str | None) -> Bid:
    user = resolve_user(db, username)
    bid = get_bid_or_404(db, bid_id)
    ensure_bid_author(db, user, bid)
    if status not in BidStatus.ALL:
        raise InvalidInputError(f"Invalid bid status, expected one of: {', '.join(BidStatus.ALL)}")
    with atomic(db, f"set status of bid {bid.id}"):
        bid.status = status
    db.refresh(bid)
    logger.info("bid %s status set to %s by %s", bid.id, status, user.username)
    return bid


def edit_bid(db: Session, bid_id: UUID, username: str | None, body: dict[str, Any]) -> Bid:
    user = resolve_user(db, username)
    bid = get_bid_or_404(db, bid_id)
    ensure_bid_author(db, user, bid)
    try:
        patch = BidPatch.model_validate(body)
    except ValidationError as e:
        raise InvalidInputError(describe_errors(e.errors())) from e
    return bid_store.edit(db, bid, patch)


def rollback_bid(db: Session, bid_id: UUID, username: str | None, version: int) -> Bid:
    user = resolve_user(db, username)
    bid = get_bid_or_404(db, bid_id)
    ensure_bid_author(db, user, bid)
    return bid_store.rollback(db, bid, version)


def submit_decision(db: Session, bid_id: UUID, username: str | None, decision: str | None) -> Bid:
    """Approve or reject a bid on behalf of the tender owner.

    Approval also closes the parent tender, committed together with the bid
    status. A single decision is final; there is no quorum of approvers.
    """
    user = resolve_user(db, username)
    bid = get_bid_or_404(db, bid_id)
    tender = get_tender_or_404(db, bid.tender_id)
    ensure_responsible(db, user, tender.organization_id)
    if decision not in BidDecision.ALL:
        raise InvalidInputError(f"Invalid decision, expected one of: {', '.join(BidDecision.ALL)}")
    with atomic(db, f"decision on bid {bid.id}"):
        if decision == BidDecision.APPROVED:
            bid.status = BidStatus.APPROVED
            tender.status = TenderStatus.CLOSED
        else:
            bid.status = BidStatus.REJECTED
    db.refresh(bid)
    logger.info("bid %s %s by %s (tender %s is %s)", bid.id, decision.lower(), user.username, tender.id, tender.status)
    return bid


def submit_feedback(db: Session, bid_id: UUID, username: str | None, text: str | None) -> Bid:
    user = resolve_user(db, username)
    bid = get_bid_or_404(db, bid_id)
    tender = get_tender_or_404(db, bid.tender_id)
    ensure_responsible(db, user, tender.organization_id)
    text = (text or "").strip()
    if not text:
        raise InvalidInputError("Feedback text is required")
    if len(text) > MAX_FEEDBACK_LEN:
        raise InvalidInputError(f"Feedback must be at most {MAX_FEEDBACK_LEN} characters")
    with atomic(db, f"feedback on bid {bid.id}"):
        db.add(BidFeedback(bid_id=bid.id, feedback=text))
    db.refresh(bid)
    logger.info("feedback added to bid %s by %s", bid.id, user.username)
    return bid


def get_reviews(
    db: Session,
    tender_id: UUID,
    author_username: str | None,
    requester_username: str | None,
    page: Page,
) -> list[BidFeedback]:
    """Feedback left on any bid of the given author, as seen by a responsible of the tender."""
    requester = resolve_user(db, requester_username)
    tender = get_tender_or_404(db, tender_id)
    ensure_responsible(db, requester, tender.organization_id)
    if not author_username or not author_username.strip():
        raise InvalidInputError("authorUsername is required")
    author = db.query(User).filter(User.username == author_username.strip()).first()
    if not author:
        raise NotFoundError("Author not found")
    return (
        db.query(BidFeedback)
        .join(Bid, BidFeedback.bid_id == Bid.id)
        .filter(_authored_by(author))
        .order_by(BidFeedback.created_at.asc(), BidFeedback.id.asc())
        .limit(page.limit)
        .offset(page.offset)
        .all()
    )

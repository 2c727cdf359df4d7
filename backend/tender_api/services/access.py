import logging
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session

from tender_api.models.bid import Bid, BidAuthorType
from tender_api.models.organization import OrganizationResponsible
from tender_api.models.user import User
from tender_api.services.exceptions import ForbiddenError, UnauthenticatedError

logger = logging.getLogger(__name__)

FORBIDDEN_REASON = "Not enough permissions to perform this action"


def resolve_user(db: Session, username: str | None) -> User:
    """Caller identity: the username must be given and belong to a known user."""
    if not username or not username.strip():
        raise UnauthenticatedError("Username is required")
    user = db.query(User).filter(User.username == username.strip()).first()
    if not user:
        logger.warning("unknown username %r", username)
        raise UnauthenticatedError("User does not exist or is invalid")
    return user


def is_responsible(db: Session, user_id: UUID, organization_id: UUID) -> bool:
    row = (
        db.query(OrganizationResponsible.id)
        .filter(
            OrganizationResponsible.organization_id == organization_id,
            OrganizationResponsible.user_id == user_id,
        )
        .first()
    )
    return row is not None


def ensure_responsible(db: Session, user: User, organization_id: UUID) -> None:
    if not is_responsible(db, user.id, organization_id):
        raise ForbiddenError(FORBIDDEN_REASON)


def ensure_bid_author(db: Session, user: User, bid: Bid) -> None:
    """The caller acts for the bid's author: the user itself or a responsible of the authoring organization."""
    if bid.author_type == BidAuthorType.USER:
        if bid.author_id != user.id:
            raise ForbiddenError(FORBIDDEN_REASON)
        return
    ensure_responsible(db, user, bid.author_id)


def responsible_organizations(user_id: UUID):
    """Subquery of the organization ids a user is responsible for."""
    return select(OrganizationResponsible.organization_id).where(OrganizationResponsible.user_id == user_id)

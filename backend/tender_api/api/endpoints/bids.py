from typing import Any
from uuid import UUID

from fastapi import APIRouter, Body, Depends, Query
from sqlalchemy.orm import Session

from tender_api.api.deps import PageDep
from tender_api.database import get_db
from tender_api.schemas.bid import BidCreate, BidFeedbackResponse, BidResponse
from tender_api.schemas.common import StatusResponse
from tender_api.services import bid_service

router = APIRouter(prefix="/bids", tags=["bids"])


@router.post("/new", response_model=BidResponse)
def create_bid(payload: BidCreate, db: Session = Depends(get_db)):
    return bid_service.create_bid(db, payload)


@router.get("/my", response_model=list[BidResponse])
def list_my_bids(page: PageDep, username: str | None = None, db: Session = Depends(get_db)):
    return bid_service.list_for_user(db, username, page)


@router.get("/{tender_id}/list", response_model=list[BidResponse])
def list_tender_bids(tender_id: UUID, page: PageDep, username: str | None = None, db: Session = Depends(get_db)):
    """Bids submitted to a tender; visible to the tender's responsibles only."""
    return bid_service.list_for_tender(db, tender_id, username, page)


@router.get("/{bid_id}/status", response_model=StatusResponse)
def get_bid_status(bid_id: UUID, username: str | None = None, db: Session = Depends(get_db)):
    return StatusResponse(status=bid_service.get_status(db, bid_id, username))


@router.put("/{bid_id}/status", response_model=BidResponse)
def update_bid_status(
    bid_id: UUID,
    username: str | None = None,
    status: str | None = None,
    db: Session = Depends(get_db),
):
    return bid_service.set_status(db, bid_id, username, status)


@router.patch("/{bid_id}/edit", response_model=BidResponse)
def edit_bid(
    bid_id: UUID,
    payload: dict[str, Any] = Body(...),
    username: str | None = None,
    db: Session = Depends(get_db),
):
    return bid_service.edit_bid(db, bid_id, username, payload)


@router.put("/{bid_id}/rollback/{version}", response_model=BidResponse)
def rollback_bid(bid_id: UUID, version: int, username: str | None = None, db: Session = Depends(get_db)):
    return bid_service.rollback_bid(db, bid_id, username, version)


@router.put("/{bid_id}/submit_decision", response_model=BidResponse)
def submit_decision(
    bid_id: UUID,
    username: str | None = None,
    decision: str | None = None,
    db: Session = Depends(get_db),
):
    """Approver workflow: Approved | Rejected. Approving closes the tender."""
    return bid_service.submit_decision(db, bid_id, username, decision)


@router.put("/{bid_id}/feedback", response_model=BidResponse)
def submit_feedback(
    bid_id: UUID,
    username: str | None = None,
    bid_feedback: str | None = Query(None, alias="bidFeedback"),
    db: Session = Depends(get_db),
):
    return bid_service.submit_feedback(db, bid_id, username, bid_feedback)


@router.get("/{tender_id}/reviews", response_model=list[BidFeedbackResponse])
def get_reviews(
    tender_id: UUID,
    page: PageDep,
    author_username: str | None = Query(None, alias="authorUsername"),
    requester_username: str | None = Query(None, alias="requesterUsername"),
    db: Session = Depends(get_db),
):
    return bid_service.get_reviews(db, tender_id, author_username, requester_username, page)

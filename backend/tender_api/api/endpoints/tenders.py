from typing import Any
from uuid import UUID

from fastapi import APIRouter, Body, Depends, Query
from sqlalchemy.orm import Session

from tender_api.api.deps import PageDep
from tender_api.database import get_db
from tender_api.schemas.common import StatusResponse
from tender_api.schemas.tender import TenderCreate, TenderResponse
from tender_api.services import tender_service

router = APIRouter(prefix="/tenders", tags=["tenders"])


@router.get("", response_model=list[TenderResponse])
def list_tenders(
    page: PageDep,
    service_type: list[str] | None = Query(None),
    db: Session = Depends(get_db),
):
    """Published tenders, by name. Repeat service_type to filter on several types."""
    return tender_service.list_published(db, service_type, page)


@router.post("/new", response_model=TenderResponse)
def create_tender(payload: TenderCreate, db: Session = Depends(get_db)):
    return tender_service.create_tender(db, payload)


@router.get("/my", response_model=list[TenderResponse])
def list_my_tenders(page: PageDep, username: str | None = None, db: Session = Depends(get_db)):
    return tender_service.list_for_user(db, username, page)


@router.get("/{tender_id}/status", response_model=StatusResponse)
def get_tender_status(tender_id: UUID, username: str | None = None, db: Session = Depends(get_db)):
    return StatusResponse(status=tender_service.get_status(db, tender_id, username))


@router.put("/{tender_id}/status", response_model=TenderResponse)
def update_tender_status(
    tender_id: UUID,
    username: str | None = None,
    status: str | None = None,
    db: Session = Depends(get_db),
):
    return tender_service.set_status(db, tender_id, username, status)


@router.patch("/{tender_id}/edit", response_model=TenderResponse)
def edit_tender(
    tender_id: UUID,
    payload: dict[str, Any] = Body(...),
    username: str | None = None,
    db: Session = Depends(get_db),
):
    """Edit name, description and/or serviceType. Each call creates a new version."""
    return tender_service.edit_tender(db, tender_id, username, payload)


@router.put("/{tender_id}/rollback/{version}", response_model=TenderResponse)
def rollback_tender(tender_id: UUID, version: int, username: str | None = None, db: Session = Depends(get_db)):
    """Restore the content of an older version as a new version."""
    return tender_service.rollback_tender(db, tender_id, username, version)

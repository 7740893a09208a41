from uuid import UUID

from fastapi import APIRouter, Body, Depends, Query
from sqlalchemy.orm import Session

from procurement.database import get_db
from procurement.schemas.tender import ServiceType, TenderCreate, TenderEdit, TenderHistoryResponse, TenderResponse
from procurement.services import tenders as tender_service

router = APIRouter(prefix="/api/tenders", tags=["tenders"])


@router.post("/new", response_model=TenderResponse)
def create_tender(payload: TenderCreate, db: Session = Depends(get_db)):
    return tender_service.create_tender(
        db,
        name=payload.name,
        description=payload.description,
        service_type=payload.service_type,
        organization_id=payload.organization_id,
        creator_username=payload.creator_username,
    )


@router.get("/", response_model=list[TenderResponse])
def list_tenders(
    service_type: ServiceType | None = Query(None, alias="serviceType"),
    offset: int = 0,
    limit: int = 0,
    username: str | None = None,
    db: Session = Depends(get_db),
):
    """Published tenders, or all tenders of the caller's organizations when ``username`` is given."""
    return tender_service.list_tenders(db, service_type=service_type, offset=offset, limit=limit, username=username)


@router.get("/my", response_model=list[TenderResponse])
def list_my_tenders(username: str, offset: int = 0, limit: int = 0, db: Session = Depends(get_db)):
    return tender_service.list_my_tenders(db, username, offset=offset, limit=limit)


@router.patch("/{tender_id}/edit", response_model=TenderResponse)
def edit_tender(tender_id: UUID, username: str, payload: TenderEdit = Body(...), db: Session = Depends(get_db)):
    return tender_service.edit_tender(
        db,
        tender_id,
        username,
        name=payload.name,
        description=payload.description,
        service_type=payload.service_type,
    )


@router.get("/{tender_id}/status", response_model=str)
def get_tender_status(tender_id: UUID, username: str | None = None, db: Session = Depends(get_db)):
    """Anyone may read the status of a published tender."""
    return tender_service.get_tender_status(db, tender_id, username)


@router.put("/{tender_id}/status", response_model=TenderResponse)
def update_tender_status(tender_id: UUID, status: str, username: str, db: Session = Depends(get_db)):
    return tender_service.update_tender_status(db, tender_id, status, username)


@router.put("/{tender_id}/rollback/{version}", response_model=TenderResponse)
def rollback_tender(tender_id: UUID, version: int, username: str, db: Session = Depends(get_db)):
    return tender_service.rollback_tender(db, tender_id, version, username)


@router.get("/{tender_id}/history", response_model=list[TenderHistoryResponse])
def tender_history(tender_id: UUID, username: str, db: Session = Depends(get_db)):
    return tender_service.tender_history(db, tender_id, username)

from typing import Literal
from uuid import UUID

from fastapi import APIRouter, Body, Depends, Query
from sqlalchemy.orm import Session

from procurement.database import get_db
from procurement.schemas.bid import BidCreate, BidEdit, BidHistoryResponse, BidResponse, ReviewResponse
from procurement.services import bids as bid_service

router = APIRouter(prefix="/api/bids", tags=["bids"])


@router.post("/new", response_model=BidResponse)
def create_bid(payload: BidCreate, db: Session = Depends(get_db)):
    return bid_service.create_bid(
        db,
        name=payload.name,
        description=payload.description,
        tender_id=payload.tender_id,
        author_type=payload.author_type,
        author_id=payload.author_id,
    )


@router.get("/my", response_model=list[BidResponse])
def list_my_bids(username: str, offset: int = 0, limit: int = 0, db: Session = Depends(get_db)):
    return bid_service.list_my_bids(db, username, offset=offset, limit=limit)


@router.get("/{tender_id}/list", response_model=list[BidResponse])
def list_tender_bids(tender_id: UUID, username: str, offset: int = 0, limit: int = 0, db: Session = Depends(get_db)):
    """All bids placed on a tender; only its organization's representatives may list them."""
    return bid_service.list_tender_bids(db, tender_id, username, offset=offset, limit=limit)


@router.get("/{bid_id}/status", response_model=str)
def get_bid_status(bid_id: UUID, username: str, db: Session = Depends(get_db)):
    return bid_service.get_bid(db, bid_id, username).status


@router.put("/{bid_id}/status", response_model=BidResponse)
def update_bid_status(bid_id: UUID, status: str, username: str, db: Session = Depends(get_db)):
    return bid_service.update_bid_status(db, bid_id, status, username)


@router.patch("/{bid_id}/edit", response_model=BidResponse)
def edit_bid(bid_id: UUID, username: str, payload: BidEdit = Body(...), db: Session = Depends(get_db)):
    return bid_service.edit_bid(db, bid_id, username, name=payload.name, description=payload.description)


@router.put("/{bid_id}/submit_decision", response_model=BidResponse)
def submit_decision(
    bid_id: UUID,
    decision: Literal["Approved", "Rejected"],
    username: str,
    db: Session = Depends(get_db),
):
    """Approve or reject a bid. Enough approvals close the tender; one rejection is final."""
    return bid_service.submit_decision(db, bid_id, decision, username)


@router.put("/{bid_id}/feedback", response_model=BidResponse)
def leave_feedback(
    bid_id: UUID,
    username: str,
    bid_feedback: str = Query(..., alias="bidFeedback", min_length=1, max_length=1000),
    db: Session = Depends(get_db),
):
    return bid_service.leave_feedback(db, bid_id, bid_feedback, username)


@router.put("/{bid_id}/rollback/{version}", response_model=BidResponse)
def rollback_bid(bid_id: UUID, version: int, username: str, db: Session = Depends(get_db)):
    return bid_service.rollback_bid(db, bid_id, version, username)


@router.get("/{bid_id}/history", response_model=list[BidHistoryResponse])
def bid_history(bid_id: UUID, username: str, db: Session = Depends(get_db)):
    return bid_service.bid_history(db, bid_id, username)


@router.get("/{tender_id}/reviews", response_model=list[ReviewResponse])
def list_reviews(
    tender_id: UUID,
    author_username: str = Query(..., alias="authorUsername"),
    requester_username: str = Query(..., alias="requesterUsername"),
    offset: int = 0,
    limit: int = 0,
    db: Session = Depends(get_db),
):
    return bid_service.list_reviews(
        db, tender_id, author_username, requester_username, offset=offset, limit=limit,
    )

import logging

from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from procurement.errors import BID_NOT_FOUND, Conflict, PersistenceError
from procurement.models.bid import Bid, BidHistory, BID_VERSIONED_FIELDS
from procurement.models.bid_decision import BidDecisionEvent
from procurement.models.review import Review
from procurement.repositories.versioned import VersionedStore

logger = logging.getLogger(__name__)

bid_store = VersionedStore(Bid, BidHistory, BID_VERSIONED_FIELDS, BID_NOT_FOUND)


def stage_counters(
    db: Session,
    bid: Bid,
    *,
    approvals: int,
    rejections: int,
    decision: str,
    actor_id=None,
) -> None:
    """Write new decision counters, guarded by the values currently loaded on ``bid``.

    Not committed; the decision engine commits together with the tender close.
    """
    stmt = (
        update(Bid)
        .where(Bid.id == bid.id, Bid.approvals == bid.approvals, Bid.rejections == bid.rejections)
        .values(approvals=approvals, rejections=rejections)
        .execution_options(synchronize_session=False)
    )
    result = db.execute(stmt)
    if result.rowcount != 1:
        raise Conflict("bid decision was submitted concurrently, retry")
    db.add(BidDecisionEvent(bid_id=bid.id, decision=decision, actor_id=actor_id))
    db.expire(bid)


def create_review(db: Session, bid_id, description: str, reviewer_id=None) -> Review:
    review = Review(bid_id=bid_id, description=description, reviewer_id=reviewer_id)
    db.add(review)
    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        raise PersistenceError("can not create review") from e
    db.refresh(review)
    logger.info("review %s added to bid %s", review.id, bid_id)
    return review


def list_reviews(db: Session, tender_id, author_id, offset: int = 0, limit: int = 0) -> list[Review]:
    """Reviews on bids of ``tender_id`` authored by ``author_id``, oldest first."""
    query = (
        db.query(Review)
        .join(Bid, Bid.id == Review.bid_id)
        .filter(Bid.tender_id == tender_id, Bid.author_id == author_id)
        .order_by(Review.created_at.asc(), Review.id.asc())
    )
    if offset and offset > 0:
        query = query.offset(offset)
    if limit and limit > 0:
        query = query.limit(limit)
    return query.all()

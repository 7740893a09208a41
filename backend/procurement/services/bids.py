from sqlalchemy.orm import Session

from procurement.errors import ORG_NOT_FOUND, InvalidInput, UserNotFound, constraint_violation_as_invalid
from procurement.models.bid import Bid, BidAuthorType, BidDecision, BidStatus
from procurement.models.review import Review
from procurement.repositories import bids as bid_repo
from procurement.repositories import directory
from procurement.repositories.bids import bid_store
from procurement.repositories.tenders import tender_store
from procurement.services import decisions
from procurement.services.access import can_write, require_user


def _check_author(db: Session, author_type: str, author_id) -> None:
    if author_type == BidAuthorType.ORGANIZATION:
        if directory.get_organization_by_id(db, author_id) is None:
            raise UserNotFound(ORG_NOT_FOUND)
    elif author_type == BidAuthorType.USER:
        if directory.get_user_by_id(db, author_id) is None:
            raise UserNotFound()
    else:
        raise InvalidInput("not allowed author type")


def create_bid(db: Session, name: str, description: str, tender_id, author_type: str, author_id) -> Bid:
    tender_store.get_by_id(db, tender_id)
    _check_author(db, author_type, author_id)
    with constraint_violation_as_invalid("can not create bid"):
        return bid_store.create(
            db,
            name=name,
            description=description,
            status=BidStatus.CREATED,
            tender_id=tender_id,
            author_type=author_type,
            author_id=author_id,
        )


def list_my_bids(db: Session, username: str, offset: int = 0, limit: int = 0) -> list[Bid]:
    user = require_user(db, username)
    return bid_store.list_by(db, {"author_id": user.id}, offset=offset, limit=limit)


def list_tender_bids(db: Session, tender_id, username: str, offset: int = 0, limit: int = 0) -> list[Bid]:
    can_write(db, tender_id, username)
    return bid_store.list_by(db, {"tender_id": tender_id}, offset=offset, limit=limit)


def get_bid(db: Session, bid_id, username: str) -> Bid:
    """The bid, if the user may act on its tender."""
    bid = bid_store.get_by_id(db, bid_id)
    can_write(db, bid.tender_id, username)
    return bid


def update_bid_status(db: Session, bid_id, status: str, username: str) -> Bid:
    if status not in BidStatus.ALL:
        raise InvalidInput("not allowed status")
    get_bid(db, bid_id, username)
    with constraint_violation_as_invalid("can not update bid"):
        return bid_store.mutate(db, bid_id, lambda current: {"status": status})


def edit_bid(db: Session, bid_id, username: str, name: str | None = None, description: str | None = None) -> Bid:
    if not (name or description):
        raise InvalidInput("incorrect request body")
    get_bid(db, bid_id, username)

    def apply(current: dict) -> dict:
        return {"name": name or current["name"], "description": description or current["description"]}

    with constraint_violation_as_invalid("can not edit bid"):
        return bid_store.mutate(db, bid_id, apply)


def rollback_bid(db: Session, bid_id, version: int, username: str) -> Bid:
    get_bid(db, bid_id, username)
    with constraint_violation_as_invalid("can not rollback bid"):
        return bid_store.rollback(db, bid_id, version)


def bid_history(db: Session, bid_id, username: str) -> list:
    get_bid(db, bid_id, username)
    return bid_store.history(db, bid_id)


def submit_decision(db: Session, bid_id, decision: str, username: str) -> Bid:
    if decision not in BidDecision.ALL:
        raise InvalidInput("not allowed decision")
    bid = bid_store.get_by_id(db, bid_id)
    actor = can_write(db, bid.tender_id, username)
    return decisions.submit_decision(db, bid_id, decision, actor_id=actor.id)


def leave_feedback(db: Session, bid_id, feedback: str, username: str) -> Bid:
    bid = bid_store.get_by_id(db, bid_id)
    reviewer = can_write(db, bid.tender_id, username)
    bid_repo.create_review(db, bid.id, feedback, reviewer_id=reviewer.id)
    return bid_store.get_by_id(db, bid_id)


def list_reviews(
    db: Session,
    tender_id,
    author_username: str,
    requester_username: str,
    offset: int = 0,
    limit: int = 0,
) -> list[Review]:
    """Feedback on the bids ``author_username`` placed on the tender."""
    can_write(db, tender_id, requester_username)
    author = require_user(db, author_username)
    return bid_repo.list_reviews(db, tender_id, author.id, offset=offset, limit=limit)

"""Quorum-based approval of bids.

Each bid carries two counters, ``approvals`` and ``rejections``. A single
rejection is final. Once approvals reach the quorum the bid is approved and
its tender is closed in the same transaction as the last counter update.

The quorum is ``min(QUORUM_CAP, number of responsible users)`` of the
deciding organization, counted from live membership each time a decision is
submitted, so adding or removing representatives mid-process moves the target.
"""
import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from procurement.errors import InvalidInput, PersistenceError, ProcurementError, UserIsNotOrgResponsible
from procurement.models.bid import Bid, BidAuthorType, BidDecision
from procurement.models.tender import TenderStatus
from procurement.repositories import directory
from procurement.repositories.bids import bid_store, stage_counters
from procurement.repositories.tenders import tender_store

logger = logging.getLogger(__name__)

QUORUM_CAP = 3


class DecisionState:
    OPEN = "Open"
    APPROVED = "Approved"
    REJECTED = "Rejected"


def quorum_for(responsible_count: int) -> int:
    return min(QUORUM_CAP, responsible_count)


def decision_state(approvals: int, rejections: int, quorum: int) -> str:
    if rejections > 0:
        return DecisionState.REJECTED
    if approvals >= quorum:
        return DecisionState.APPROVED
    return DecisionState.OPEN


def deciding_organization_id(db: Session, bid: Bid):
    """The author organization, or the lowest-id organization the author user represents."""
    if bid.author_type == BidAuthorType.ORGANIZATION:
        return bid.author_id
    organizations = directory.get_organizations_by_user_id(db, bid.author_id)
    if not organizations:
        raise UserIsNotOrgResponsible()
    return organizations[0].id


def bid_quorum(db: Session, bid: Bid) -> int:
    responsible = directory.get_responsible_user_ids(db, deciding_organization_id(db, bid))
    if not responsible:
        raise UserIsNotOrgResponsible()
    return quorum_for(len(responsible))


def _close_tender(current: dict) -> dict:
    return {"status": TenderStatus.CLOSED}


def submit_decision(db: Session, bid_id, decision: str, actor_id=None) -> Bid:
    if decision not in BidDecision.ALL:
        raise InvalidInput("not allowed decision")

    bid = bid_store.get_by_id(db, bid_id)
    quorum = bid_quorum(db, bid)
    approvals, rejections, tender_id = bid.approvals, bid.rejections, bid.tender_id

    state = decision_state(approvals, rejections, quorum)
    if state == DecisionState.REJECTED:
        raise InvalidInput("bid is already rejected")
    if state == DecisionState.APPROVED:
        raise InvalidInput("bid is already approved")

    if decision == BidDecision.REJECTED:
        rejections += 1
    else:
        approvals += 1
    closes_tender = decision_state(approvals, rejections, quorum) == DecisionState.APPROVED

    try:
        stage_counters(db, bid, approvals=approvals, rejections=rejections, decision=decision, actor_id=actor_id)
        if closes_tender and tender_store.get_by_id(db, tender_id).status != TenderStatus.CLOSED:
            tender_store.stage_mutation(db, tender_id, _close_tender)
        db.commit()
    except ProcurementError:
        db.rollback()
        raise
    except SQLAlchemyError as e:
        db.rollback()
        raise PersistenceError("can not submit decision") from e

    logger.info(
        "bid %s: %s (approvals=%s/%s rejections=%s)", bid_id, decision, approvals, quorum, rejections,
    )
    if closes_tender:
        logger.info("tender %s closed by quorum approval of bid %s", tender_id, bid_id)
    return bid_store.get_by_id(db, bid_id)

from sqlalchemy.orm import Session

from procurement.errors import InvalidInput, UserNotFound, constraint_violation_as_invalid
from procurement.models.tender import Tender, TenderServiceType, TenderStatus
from procurement.repositories import directory
from procurement.repositories.tenders import tender_store
from procurement.services.access import can_read, can_write, require_org_responsible, require_user


def _check_service_type(service_type: str) -> None:
    if service_type not in TenderServiceType.ALL:
        raise InvalidInput("not allowed service type")


def create_tender(
    db: Session,
    name: str,
    description: str,
    service_type: str,
    organization_id,
    creator_username: str,
) -> Tender:
    """Creator must represent the organization the tender is published for."""
    _check_service_type(service_type)
    creator = require_org_responsible(db, organization_id, creator_username)
    with constraint_violation_as_invalid("tender creation failed, check fields"):
        return tender_store.create(
            db,
            name=name,
            description=description,
            service_type=service_type,
            status=TenderStatus.CREATED,
            organization_id=organization_id,
            creator_id=creator.id,
        )


def list_tenders(
    db: Session,
    service_type: str | None = None,
    offset: int = 0,
    limit: int = 0,
    username: str | None = None,
) -> list[Tender]:
    """Published tenders, or, for a known user, every tender of the user's organizations."""
    if service_type:
        _check_service_type(service_type)
    filters: dict = {"service_type": service_type or None}
    if username:
        user = directory.get_user_by_username(db, username)
        if user is None:
            raise UserNotFound()
        filters["organization_id"] = [org.id for org in directory.get_organizations_by_user_id(db, user.id)]
    else:
        filters["status"] = TenderStatus.PUBLISHED
    return tender_store.list_by(db, filters, offset=offset, limit=limit)


def list_my_tenders(db: Session, username: str, offset: int = 0, limit: int = 0) -> list[Tender]:
    user = require_user(db, username)
    return tender_store.list_by(db, {"creator_id": user.id}, offset=offset, limit=limit)


def get_tender(db: Session, tender_id, username: str | None) -> Tender:
    can_read(db, tender_id, username)
    return tender_store.get_by_id(db, tender_id)


def get_tender_status(db: Session, tender_id, username: str | None) -> str:
    return get_tender(db, tender_id, username).status


def update_tender_status(db: Session, tender_id, status: str, username: str) -> Tender:
    if status not in TenderStatus.ALL:
        raise InvalidInput("not allowed status")
    can_write(db, tender_id, username)
    with constraint_violation_as_invalid("can not update tender"):
        return tender_store.mutate(db, tender_id, lambda current: {"status": status})


def edit_tender(
    db: Session,
    tender_id,
    username: str,
    name: str | None = None,
    description: str | None = None,
    service_type: str | None = None,
) -> Tender:
    """Partial edit; an empty or missing field keeps its current value."""
    if service_type:
        _check_service_type(service_type)
    if not (name or description or service_type):
        raise InvalidInput("incorrect request body")
    can_write(db, tender_id, username)

    def apply(current: dict) -> dict:
        return {
            "name": name or current["name"],
            "description": description or current["description"],
            "service_type": service_type or current["service_type"],
        }

    with constraint_violation_as_invalid("can not update tender"):
        return tender_store.mutate(db, tender_id, apply)


def rollback_tender(db: Session, tender_id, version: int, username: str) -> Tender:
    can_write(db, tender_id, username)
    with constraint_violation_as_invalid("can not rollback tender"):
        return tender_store.rollback(db, tender_id, version)


def tender_history(db: Session, tender_id, username: str) -> list:
    can_write(db, tender_id, username)
    return tender_store.history(db, tender_id)

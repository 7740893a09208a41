"""Read/write rights on a tender, based on organization membership.

Both predicates return the resolved user (or None for an anonymous public
read) and raise a domain error when access is denied. Callers check rights
before touching a tender or any bid attached to it.
"""
from sqlalchemy.orm import Session

from procurement.errors import UserIsNotOrgResponsible, UserNotFound
from procurement.models.organization import Employee
from procurement.models.tender import TenderStatus
from procurement.repositories import directory
from procurement.repositories.tenders import tender_store


def require_user(db: Session, username: str | None) -> Employee:
    user = directory.get_user_by_username(db, username)
    if user is None:
        raise UserNotFound()
    return user


def require_org_responsible(db: Session, organization_id, username: str | None) -> Employee:
    user = require_user(db, username)
    if user.id not in directory.get_responsible_user_ids(db, organization_id):
        raise UserIsNotOrgResponsible()
    return user


def can_write(db: Session, tender_id, username: str | None) -> Employee:
    tender = tender_store.get_by_id(db, tender_id)
    return require_org_responsible(db, tender.organization_id, username)


def can_read(db: Session, tender_id, username: str | None) -> Employee | None:
    tender = tender_store.get_by_id(db, tender_id)
    if tender.status == TenderStatus.PUBLISHED:
        return None
    return require_org_responsible(db, tender.organization_id, username)

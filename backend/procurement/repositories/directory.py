"""Identity and organization-membership lookups. Read-only."""
from sqlalchemy.orm import Session

from procurement.models.organization import Employee, Organization, OrganizationResponsible


def get_user_by_username(db: Session, username: str | None) -> Employee | None:
    if not username:
        return None
    return db.query(Employee).filter(Employee.username == username).first()


def get_user_by_id(db: Session, user_id) -> Employee | None:
    return db.query(Employee).filter(Employee.id == user_id).first()


def get_organization_by_id(db: Session, organization_id) -> Organization | None:
    return db.query(Organization).filter(Organization.id == organization_id).first()


def get_organizations_by_user_id(db: Session, user_id) -> list[Organization]:
    """Organizations the user represents, lowest id first."""
    return (
        db.query(Organization)
        .join(OrganizationResponsible, OrganizationResponsible.organization_id == Organization.id)
        .filter(OrganizationResponsible.user_id == user_id)
        .order_by(Organization.id.asc())
        .all()
    )


def get_responsible_user_ids(db: Session, organization_id) -> set:
    rows = (
        db.query(OrganizationResponsible.user_id)
        .filter(OrganizationResponsible.organization_id == organization_id)
        .all()
    )
    return {row.user_id for row in rows}

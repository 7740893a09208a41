import os
import uuid

# Keep the module-level engine off the real database while the app is imported.
os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from procurement.database import get_db
from procurement.main import app
from procurement.models import Employee, Organization, OrganizationResponsible
from procurement.models.base import Base


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


def _add_organization(db, name, usernames, org_id=None):
    org = Organization(id=org_id or uuid.uuid4(), name=name, type="LLC")
    db.add(org)
    for username in usernames:
        user = db.query(Employee).filter(Employee.username == username).first()
        if user is None:
            user = Employee(username=username)
            db.add(user)
            db.flush()
        db.add(OrganizationResponsible(organization_id=org.id, user_id=user.id))
    db.commit()
    return org


@pytest.fixture
def make_organization(db):
    def make(name, usernames, org_id=None):
        return _add_organization(db, name, usernames, org_id=org_id)

    return make


@pytest.fixture
def directory(db):
    """Org A with two representatives, org B with five, and one outsider."""
    org_a = _add_organization(db, "Alpha LLC", ["alice", "bob"])
    org_b = _add_organization(db, "Beta LLC", ["carol", "dave", "erin", "frank", "grace"])
    db.add(Employee(username="mallory"))
    db.commit()
    users = {u.username: u for u in db.query(Employee).all()}
    return {"org_a": org_a, "org_b": org_b, "users": users}


@pytest.fixture
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()

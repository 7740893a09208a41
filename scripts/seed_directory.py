#!/usr/bin/env python3
"""
Seed the employee/organization directory for local runs.

The API only reads users and organizations; it never creates them. Run this
once against the same database the backend uses (DATABASE_URL / POSTGRES_CONN).

Usage:
  python scripts/seed_directory.py
  python scripts/seed_directory.py --file directory.json

JSON format:
  {"organizations": [{"name": "Alpha LLC", "type": "LLC",
                      "responsibles": ["alice", "bob"]}],
   "employees": [{"username": "mallory", "first_name": "Mal"}]}

Existing usernames are reused; organizations are matched by name. Writes
scripts/directory_manifest.json with the ids the API expects in requests.
"""

import json
import sys
from pathlib import Path

from procurement.database import SessionLocal, engine
from procurement.models import Employee, Organization, OrganizationResponsible
from procurement.models.base import Base

DEMO_DIRECTORY = {
    "organizations": [
        {"name": "Alpha LLC", "type": "LLC", "responsibles": ["alice", "bob"]},
        {"name": "Beta JSC", "type": "JSC", "responsibles": ["carol", "dave", "erin", "frank", "grace"]},
        {"name": "Gamma IE", "type": "IE", "responsibles": ["ivan"]},
    ],
    "employees": [
        {"username": "mallory", "first_name": "Mallory", "last_name": "Outsider"},
    ],
}


def get_or_create_employee(db, username: str, **names) -> Employee:
    user = db.query(Employee).filter(Employee.username == username).first()
    if user is None:
        user = Employee(username=username, **names)
        db.add(user)
        db.flush()
        print(f"  Employee created: {username}")
    return user


def get_or_create_organization(db, org_entry: dict) -> Organization:
    org = db.query(Organization).filter(Organization.name == org_entry["name"]).first()
    if org is None:
        org = Organization(name=org_entry["name"], type=org_entry.get("type"), description=org_entry.get("description"))
        db.add(org)
        db.flush()
        print(f"  Organization created: {org_entry['name']}")
    return org


def seed(db, directory: dict) -> dict:
    manifest = {"organizations": {}, "employees": {}}
    for entry in directory.get("employees", []):
        user = get_or_create_employee(db, **entry)
        manifest["employees"][user.username] = str(user.id)

    for org_entry in directory.get("organizations", []):
        org = get_or_create_organization(db, org_entry)
        manifest["organizations"][org.name] = str(org.id)
        for username in org_entry.get("responsibles", []):
            user = get_or_create_employee(db, username)
            manifest["employees"][username] = str(user.id)
            exists = (
                db.query(OrganizationResponsible)
                .filter(OrganizationResponsible.organization_id == org.id, OrganizationResponsible.user_id == user.id)
                .first()
            )
            if exists is None:
                db.add(OrganizationResponsible(organization_id=org.id, user_id=user.id))
    db.commit()
    return manifest


def main() -> None:
    if "--help" in sys.argv or "-h" in sys.argv:
        print(__doc__)
        sys.exit(0)
    directory = DEMO_DIRECTORY
    for i, arg in enumerate(sys.argv):
        if arg == "--file" and i + 1 < len(sys.argv):
            directory = json.loads(Path(sys.argv[i + 1]).read_text(encoding="utf-8"))
            break

    print(f"Using database: {engine.url.render_as_string(hide_password=True)}")
    Base.metadata.create_all(bind=engine)

    db = SessionLocal()
    try:
        manifest = seed(db, directory)
    finally:
        db.close()

    manifest_path = Path(__file__).resolve().parent / "directory_manifest.json"
    manifest_path.write_text(json.dumps(manifest, indent=2), encoding="utf-8")
    print(f"  Manifest: {manifest_path}")
    print("\nDone. Try: GET /api/tenders/?username=alice")


if __name__ == "__main__":
    main()

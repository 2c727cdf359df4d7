"""
Create demo users and organizations, and print a bearer token for local use.

The API has no endpoints for users or organizations, so this writes them
straight to the configured database (DATABASE_URL).

Usage:
  tender-api-seed
  tender-api-seed --token-hours 24
"""
import sys
from datetime import datetime, timedelta, timezone

import jwt
from sqlalchemy.orm import Session

import tender_api.models  # noqa: F401
from tender_api.config import Settings
from tender_api.database import build_engine, build_session_factory
from tender_api.models.base import Base
from tender_api.models.organization import Organization, OrganizationResponsible, OrganizationType
from tender_api.models.user import User

# username -> organization names the user is responsible for
DEMO_USERS = {
    "user1": ["Avito"],
    "user2": ["Avito"],
    "user3": ["Builders JSC"],
    "user4": ["Delivery Guys"],
    "user5": [],
}
DEMO_ORGANIZATIONS = {
    "Avito": OrganizationType.LLC,
    "Builders JSC": OrganizationType.JSC,
    "Delivery Guys": OrganizationType.IE,
}


def seed_demo_data(db: Session) -> dict[str, str]:
    """Insert the demo rows that are missing. Returns organization name -> id."""
    orgs = {}
    for name, org_type in DEMO_ORGANIZATIONS.items():
        org = db.query(Organization).filter(Organization.name == name).first()
        if org is None:
            org = Organization(name=name, type=org_type, description=f"Demo organization {name}")
            db.add(org)
            db.flush()
        orgs[name] = org

    for username, org_names in DEMO_USERS.items():
        user = db.query(User).filter(User.username == username).first()
        if user is None:
            user = User(username=username, first_name=username.capitalize())
            db.add(user)
            db.flush()
        for org_name in org_names:
            org = orgs[org_name]
            exists = (
                db.query(OrganizationResponsible)
                .filter(OrganizationResponsible.organization_id == org.id, OrganizationResponsible.user_id == user.id)
                .first()
            )
            if exists is None:
                db.add(OrganizationResponsible(organization_id=org.id, user_id=user.id))
    db.commit()
    return {name: str(org.id) for name, org in orgs.items()}


def make_dev_token(secret: str, hours: int = 12) -> str:
    exp = datetime.now(timezone.utc) + timedelta(hours=hours)
    return jwt.encode({"sub": "dev", "exp": exp}, secret, algorithm="HS256")


def main() -> None:
    if "--help" in sys.argv or "-h" in sys.argv:
        print(__doc__)
        sys.exit(0)
    hours = 12
    for i, arg in enumerate(sys.argv):
        if arg == "--token-hours" and i + 1 < len(sys.argv):
            hours = int(sys.argv[i + 1])
            break

    settings = Settings.from_env()
    engine = build_engine(settings.database_url)
    Base.metadata.create_all(bind=engine)
    with build_session_factory(engine)() as db:
        orgs = seed_demo_data(db)

    print("Organizations:")
    for name, org_id in orgs.items():
        print(f"  {name}: {org_id}")
    print("Users: " + ", ".join(DEMO_USERS))
    print(f"\nBearer token (valid {hours}h):\n  {make_dev_token(settings.jwt_secret, hours)}")


if __name__ == "__main__":
    main()

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

import jwt
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session
from sqlalchemy.pool import StaticPool

import tender_api.models  # noqa: F401
from tender_api.config import Settings
from tender_api.main import create_app
from tender_api.models.base import Base
from tender_api.models.organization import Organization, OrganizationResponsible, OrganizationType
from tender_api.models.user import User

JWT_SECRET = "test-secret"


def _make_token(secret: str = JWT_SECRET, expires_in: timedelta = timedelta(hours=1)) -> str:
    exp = datetime.now(timezone.utc) + expires_in
    return jwt.encode({"sub": "tester", "exp": exp}, secret, algorithm="HS256")


@pytest.fixture
def make_token():
    return _make_token


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def settings():
    return Settings(database_url="sqlite://", jwt_secret=JWT_SECRET)


@pytest.fixture
def client(settings, engine):
    return TestClient(create_app(settings=settings, engine=engine))


@pytest.fixture
def headers():
    return {"Authorization": f"Bearer {_make_token()}"}


@pytest.fixture
def world(engine):
    """alice runs Acme (tender owner), bob runs Builders (bidder), carol belongs nowhere."""
    with Session(engine) as s:
        alice = User(username="alice", first_name="Alice")
        bob = User(username="bob", first_name="Bob")
        carol = User(username="carol", first_name="Carol")
        acme = Organization(name="Acme", type=OrganizationType.LLC)
        builders = Organization(name="Builders", type=OrganizationType.JSC)
        s.add_all([alice, bob, carol, acme, builders])
        s.flush()
        s.add_all([
            OrganizationResponsible(organization_id=acme.id, user_id=alice.id),
            OrganizationResponsible(organization_id=builders.id, user_id=bob.id),
        ])
        s.commit()
        return SimpleNamespace(
            alice_id=alice.id,
            bob_id=bob.id,
            carol_id=carol.id,
            acme_id=acme.id,
            builders_id=builders.id,
        )


@pytest.fixture
def new_tender(client, headers, world):
    def _create(**overrides):
        body = {
            "name": "Road repair",
            "description": "Fix the main road",
            "serviceType": "Construction",
            "status": "Published",
            "organizationId": str(world.acme_id),
            "creatorUsername": "alice",
        }
        body.update(overrides)
        r = client.post("/api/tenders/new", json=body, headers=headers)
        assert r.status_code == 200, r.text
        return r.json()

    return _create


@pytest.fixture
def new_bid(client, headers, world, new_tender):
    def _create(tender_id=None, **overrides):
        if tender_id is None:
            tender_id = new_tender()["id"]
        body = {
            "name": "Builders offer",
            "description": "We can do it in 3 weeks",
            "status": "Published",
            "tenderId": tender_id,
            "organizationId": str(world.builders_id),
            "creatorUsername": "bob",
        }
        body.update(overrides)
        r = client.post("/api/bids/new", json=body, headers=headers)
        assert r.status_code == 200, r.text
        return r.json()

    return _create

"""Pytest fixtures — file-backed SQLite database, isolated per test."""
import itertools
from datetime import datetime, timezone, timedelta

import pytest
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from fastapi.testclient import TestClient

from tourmarket.config import settings
from tourmarket.database import Base, get_db
from tourmarket.main import app
from tourmarket.services import notification_service

# Import all models so they register with Base.metadata
from tourmarket.models.user import User, Role                                       # noqa: F401
from tourmarket.models.guide import Guide, GuideProfileChangeRequest                # noqa: F401
from tourmarket.models.program import Program, ProgramDay, ProgramPoint, PricingTier  # noqa: F401
from tourmarket.models.booking import Booking, Review                               # noqa: F401
from tourmarket.models.auction import Auction, Bid                                  # noqa: F401
from tourmarket.models.token import TokenTransaction                                # noqa: F401

SQLITE_URL = "sqlite:///./test.db"

_telegram_ids = itertools.count(100000)


@pytest.fixture(scope="function")
def db_engine():
    """Create a fresh SQLite engine for each test."""
    engine = create_engine(SQLITE_URL, connect_args={"check_same_thread": False})

    # Enable WAL mode for better concurrency
    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_conn, connection_record):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.close()

    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def db(db_engine):
    """Yield a database session on the same engine the API uses."""
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(scope="function")
def client(db_engine):
    """FastAPI TestClient with the database dependency overridden to use SQLite."""
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)

    def _override_get_db():
        session = TestingSession()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture(autouse=True)
def sent_messages(monkeypatch):
    """Capture Telegram messages instead of calling the Bot API.

    Yields a list of ``(chat_id, text)`` tuples in send order.
    """
    sent = []

    def _fake_send(chat_id, text):
        sent.append((chat_id, text))
        return {"ok": True}

    monkeypatch.setattr(settings, "TELEGRAM_BOT_TOKEN", "test-token")
    monkeypatch.setattr(notification_service, "send_telegram_message", _fake_send)
    yield sent


# ---------------------------------------------------------------------------
# Helpers: build users, guides, programs and auctions through the API
# ---------------------------------------------------------------------------
def future(hours: int = 48) -> str:
    return (datetime.now(timezone.utc) + timedelta(hours=hours)).isoformat()


def create_test_user(client: TestClient, first_name: str = "Test", telegram_id: str = None) -> dict:
    """Helper — POST /api/users and return response JSON."""
    resp = client.post("/api/users/", json={
        "telegram_id": telegram_id or str(next(_telegram_ids)),
        "first_name": first_name,
    })
    assert resp.status_code == 201, resp.text
    return resp.json()


def set_role(db, user_id: str, role: Role) -> None:
    """Write a role straight to the database (bootstrap for admins)."""
    db.query(User).filter(User.user_id == user_id).update({"role": role})
    db.commit()


def create_admin(client: TestClient, db, first_name: str = "Admin") -> dict:
    admin = create_test_user(client, first_name=first_name)
    set_role(db, admin["user_id"], Role.ADMIN)
    return admin


def register_guide(client: TestClient, user: dict, **fields) -> dict:
    """Helper — POST /api/guides/register for an existing user."""
    resp = client.post(
        "/api/guides/register",
        params={"actor_user_id": user["user_id"]},
        json=fields,
    )
    assert resp.status_code == 201, resp.text
    return resp.json()


def approve_guide(client: TestClient, admin: dict, guide_id: str, approved: bool = True) -> dict:
    resp = client.patch(
        f"/api/admin/guides/{guide_id}/approval",
        params={"actor_user_id": admin["user_id"]},
        json={"approved": approved},
    )
    assert resp.status_code == 200, resp.text
    return resp.json()


def create_approved_guide(client: TestClient, admin: dict, first_name: str = "Guide", **fields) -> tuple:
    """Helper — returns ``(user, guide)`` for a freshly approved guide."""
    user = create_test_user(client, first_name=first_name)
    guide = register_guide(client, user, **fields)
    guide = approve_guide(client, admin, guide["guide_id"])
    return user, guide


def program_payload(**overrides) -> dict:
    payload = {
        "title": "Old Town Walk",
        "description": "A day around the old town",
        "base_price": 120.0,
        "duration_days": 1,
        "max_group_size": 10,
        "start_location": "Central Square",
        "regions": ["Tbilisi"],
        "tags": ["history"],
        "days": [{"title": "Day one", "points": [{"title": "Cathedral", "point_type": "SIGHTSEEING"}]}],
        "pricing_tiers": [],
    }
    payload.update(overrides)
    return payload


def create_program(client: TestClient, guide_user: dict, admin: dict, approve: bool = True, **overrides) -> dict:
    """Helper — a guide creates a program; an admin approves it by default."""
    resp = client.post(
        "/api/programs/",
        params={"actor_user_id": guide_user["user_id"]},
        json=program_payload(**overrides),
    )
    assert resp.status_code == 201, resp.text
    program = resp.json()
    if approve:
        resp = client.patch(
            f"/api/admin/programs/{program['program_id']}/approval",
            params={"actor_user_id": admin["user_id"]},
            json={"approved": True},
        )
        assert resp.status_code == 200, resp.text
        program = resp.json()
    return program


def auction_payload(**overrides) -> dict:
    payload = {
        "title": "Family trip to the mountains",
        "description": "Two adults, two kids, looking for a guide",
        "location": "Kazbegi",
        "start_date": future(24 * 30),
        "number_of_people": 4,
        "budget": 800.0,
        "expires_at": future(48),
    }
    payload.update(overrides)
    return payload


def create_auction(client: TestClient, creator: dict, **overrides) -> dict:
    """Helper — POST /api/auctions and return response JSON."""
    resp = client.post(
        "/api/auctions/",
        params={"actor_user_id": creator["user_id"]},
        json=auction_payload(**overrides),
    )
    assert resp.status_code == 201, resp.text
    return resp.json()


def place_bid(client: TestClient, bidder: dict, auction_id: str, price: float, description: str = "I can do it"):
    """Helper — returns the raw response so callers can assert on failures."""
    return client.post(
        f"/api/auctions/{auction_id}/bids",
        params={"actor_user_id": bidder["user_id"]},
        json={"price": price, "description": description},
    )

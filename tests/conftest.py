"""
Pytest Fixtures für das Reservierungssystem.

Fixtures sind wiederverwendbare Setup-Funktionen für Tests.
Sie werden automatisch von pytest erkannt und injiziert.
"""
import os

# Settings werden beim Import von app.config gelesen, daher vor allen App-Imports setzen
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("MAIL_SUPPRESS_SEND", "true")
os.environ.setdefault("SMTP_FROM", "familie@example.com")

from datetime import date
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.main import app
from app.database import Base, get_db
from app.dependencies import get_change_feed
from app.models import User, PropertyId
from app.schemas.reservation import ReservationCreate
from app.services.change_feed import ChangeFeed
from app.services.reservation_service import ReservationLedger
from app.utils.security import hash_password


# ============ DATENBANK SETUP ============

# SQLite In-Memory, mit TEST_DATABASE_URL z.B. gegen PostgreSQL testen
SQLALCHEMY_TEST_DATABASE_URL = os.environ.get("TEST_DATABASE_URL", "sqlite://")

if SQLALCHEMY_TEST_DATABASE_URL.startswith("sqlite"):
    engine = create_engine(
        SQLALCHEMY_TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool
    )
else:
    engine = create_engine(SQLALCHEMY_TEST_DATABASE_URL)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


# ============ BASIS FIXTURES ============

@pytest.fixture(scope="function")
def db():
    """
    Erstellt eine frische Datenbank für jeden Test.

    scope="function" bedeutet: Für JEDEN Test neu erstellen.
    """
    Base.metadata.create_all(bind=engine)

    db = TestingSessionLocal()

    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def feed():
    """Eigener ChangeFeed pro Test"""
    return ChangeFeed()


@pytest.fixture
def ledger(db, feed):
    return ReservationLedger(db, feed)


@pytest.fixture(scope="function")
def client(db, feed):
    """
    FastAPI TestClient mit überschriebener Datenbank und eigenem ChangeFeed.
    """
    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_change_feed] = lambda: feed

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


# ============ STAMMDATEN FIXTURES ============

def make_draft(**overrides) -> ReservationCreate:
    """Reservierungs-Entwurf mit sinnvollen Standardwerten"""
    data = {
        "property_id": PropertyId.CARAGUA,
        "guest_name": "Tio João",
        "email": None,
        "color": "#ef4444",
        "start_date": date(2025, 7, 10),
        "end_date": date(2025, 7, 15),
        "notes": "Grill sauber machen!",
    }
    data.update(overrides)
    return ReservationCreate(**data)


@pytest.fixture
def reservation(ledger):
    """Bestehende Reservierung: Caraguatatuba, 10.07.2025 bis 15.07.2025"""
    result = ledger.try_create(make_draft())
    assert result.ok, result.message
    return result.value


# ============ USER FIXTURES ============

@pytest.fixture
def admin_user(db):
    """Erstellt Admin-User"""
    user = User(
        id=uuid4(),
        name="Test Admin",
        email="admin@test.com",
        password_hash=hash_password("adminpass123"),
        is_active=True
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


# ============ AUTH TOKEN FIXTURES ============

@pytest.fixture
def admin_token(client, admin_user):
    """Login als Admin, gibt Token zurück"""
    response = client.post("/auth/login", json={
        "email": "admin@test.com",
        "password": "adminpass123"
    })
    assert response.status_code == 200, f"Admin login failed: {response.json()}"
    return response.json()["access_token"]


# ============ HELPER FUNKTIONEN ============

def auth_header(token: str) -> dict:
    """Erstellt Authorization Header"""
    return {"Authorization": f"Bearer {token}"}


def reservation_payload(**overrides) -> dict:
    """JSON-Body für POST/PUT /reservations"""
    payload = {
        "property_id": "caraguatatuba",
        "guest_name": "Tia Maria",
        "email": None,
        "color": "#22c55e",
        "start_date": "2025-07-10",
        "end_date": "2025-07-15",
        "notes": None,
    }
    payload.update(overrides)
    return payload

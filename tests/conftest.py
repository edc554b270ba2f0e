"""
tests/conftest.py
Shared fixtures: an isolated in-memory database, a TestClient wired to it,
and identity-provider style tokens for test users.
"""

import os

# Must be set before the application modules read their settings
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["AUTO_CREATE_TABLES"] = "false"

from datetime import date, timedelta
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from jose import jwt
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from cabin_reservations.config import settings
from cabin_reservations.database import Base, get_db
from cabin_reservations.main import app
from cabin_reservations.models import Booking, BookingStatus, Cabin, PaymentStatus, UserProfile

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


def make_token(user_id: str, email: str, full_name: str = None) -> str:
    claims = {"sub": user_id, "email": email, "aud": "authenticated"}
    if full_name:
        claims["user_metadata"] = {"full_name": full_name}
    return jwt.encode(claims, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def auth_headers(user: UserProfile) -> dict:
    return {"Authorization": f"Bearer {make_token(user.id, user.email, user.full_name)}"}


def future(days: int) -> date:
    return date.today() + timedelta(days=days)


@pytest.fixture(autouse=True)
def _schema():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


def _profile(db, user_id, email, full_name, is_admin=False):
    profile = UserProfile(id=user_id, email=email, full_name=full_name, is_admin=is_admin)
    db.add(profile)
    db.commit()
    db.refresh(profile)
    return profile


@pytest.fixture
def user(db):
    return _profile(db, "user-kari", "kari@family.no", "Kari Nordmann")


@pytest.fixture
def other_user(db):
    return _profile(db, "user-per", "per@family.no", "Per Hansen")


@pytest.fixture
def admin_user(db):
    return _profile(db, "user-admin", "admin@family.no", "Anne Admin", is_admin=True)


@pytest.fixture
def cabin(db):
    cabin = Cabin(name="Fjellhytta", description="Up the mountain", capacity=4, nightly_fee=Decimal("150"))
    db.add(cabin)
    db.commit()
    db.refresh(cabin)
    return cabin


@pytest.fixture
def free_cabin(db):
    cabin = Cabin(name="Sjøbua", capacity=2, nightly_fee=Decimal("0"))
    db.add(cabin)
    db.commit()
    db.refresh(cabin)
    return cabin


@pytest.fixture
def make_booking(db):
    """Insert a booking directly, bypassing the API rules (past dates allowed)."""

    def _make(cabin, owner, start, end, guests=1, status=BookingStatus.PENDING,
              payment_status=PaymentStatus.UNPAID, **extra):
        booking = Booking(
            cabin_id=cabin.id,
            user_id=owner.id,
            start_date=start,
            end_date=end,
            number_of_guests=guests,
            status=status,
            payment_status=payment_status,
            **extra,
        )
        db.add(booking)
        db.commit()
        db.refresh(booking)
        return booking

    return _make

import os

# settings are read at import time, so the test environment goes in first
os.environ["SEAT_BOOKING_DATABASE_URL"] = "sqlite://"
os.environ["SEAT_BOOKING_BCRYPT_ROUNDS"] = "4"
os.environ.setdefault("SEAT_BOOKING_LOG_LEVEL", "WARNING")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from seat_booking.database import Base, get_db, seed_seats
from seat_booking.main import app
from seat_booking.models import User, UserType
from seat_booking.security import hash_password

from tests.constants import DEFAULT_PASSWORD, SEATS_PER_ROW, TOTAL_SEATS


@pytest.fixture()
def engine():
    engine = create_engine(
        "sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def session_factory(engine):
    Session = sessionmaker(bind=engine, autoflush=False, autocommit=False)
    db = Session()
    try:
        seed_seats(db, TOTAL_SEATS, SEATS_PER_ROW)
    finally:
        db.close()
    return Session


@pytest.fixture()
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def make_user(db):
    counter = {"n": 0}

    def _make_user(name="Test User", email=None, user_type=UserType.customer.value):
        counter["n"] += 1
        user = User(
            name=name,
            email=email or f"user{counter['n']}@example.com",
            password=hash_password(DEFAULT_PASSWORD, rounds=4),
            user_type=user_type,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make_user


@pytest.fixture()
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()

import pytest
from pydantic import ValidationError
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from seat_booking.config import Settings
from seat_booking.database import Base, seed_seats
from seat_booking.models import Seat


@pytest.fixture()
def empty_db():
    engine = create_engine(
        "sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool
    )
    Base.metadata.create_all(engine)
    session = sessionmaker(bind=engine)()
    yield session
    session.close()
    engine.dispose()


class TestSeedSeats:

    def test_default_layout(self, empty_db):
        assert seed_seats(empty_db, 80, 7) == 80
        rows = {}
        for seat in empty_db.query(Seat).order_by(Seat.seat_number):
            rows.setdefault(seat.row_number, []).append(seat.seat_number)
        assert len(rows) == 12
        assert all(len(rows[r]) == 7 for r in range(1, 12))
        assert rows[12] == [78, 79, 80]
        assert empty_db.query(Seat).filter(Seat.booked_by.is_not(None)).count() == 0

    def test_seeding_is_idempotent(self, empty_db):
        seed_seats(empty_db, 10, 5)
        assert seed_seats(empty_db, 10, 5) == 0
        assert empty_db.query(Seat).count() == 10

    def test_custom_layout(self, empty_db):
        seed_seats(empty_db, 10, 4)
        assert [s.row_number for s in empty_db.query(Seat).order_by(Seat.seat_number)] == [
            1, 1, 1, 1, 2, 2, 2, 2, 3, 3,
        ]


class TestSettings:

    def test_cors_origins_are_split(self):
        settings = Settings(BACKEND_CORS_ORIGINS="http://localhost:3000, https://seats.example.com,")
        assert settings.cors_origins == ["http://localhost:3000", "https://seats.example.com"]

    def test_no_cors_origins_by_default(self):
        assert Settings(BACKEND_CORS_ORIGINS="").cors_origins == []

    def test_env_prefix(self, monkeypatch):
        monkeypatch.setenv("SEAT_BOOKING_TOTAL_SEATS", "42")
        assert Settings().TOTAL_SEATS == 42

    @pytest.mark.parametrize("field", ["TOTAL_SEATS", "SEATS_PER_ROW", "MAX_SEATS_PER_BOOKING"])
    def test_seat_settings_must_be_positive(self, field):
        with pytest.raises(ValidationError):
            Settings(**{field: 0})

    def test_bcrypt_rounds_range(self):
        with pytest.raises(ValidationError):
            Settings(BCRYPT_ROUNDS=3)

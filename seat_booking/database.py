"""Database engine, session factory and seat pool seeding."""

from typing import Iterator

from loguru import logger
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from seat_booking.config import settings


Base = declarative_base()


def make_engine(url: str, echo: bool = False):
    if url.startswith("sqlite"):
        # the same connection is used from FastAPI's threadpool
        return create_engine(url, echo=echo, connect_args={"check_same_thread": False})
    return create_engine(url, echo=echo, pool_pre_ping=True)


engine = make_engine(settings.DATABASE_URL, echo=settings.DB_ECHO)
SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False)


def get_db() -> Iterator[Session]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


# -----------------------------
# Seat pool seeding
# -----------------------------

def seed_seats(db: Session, total_seats: int, seats_per_row: int) -> int:
    """Create the seat pool if the seat table is empty.

    Seats are numbered from 1 and filled row by row, so with 80 seats and 7 per
    row the last row holds the 3 leftover seats. Returns the number of seats
    created (0 when the pool already exists).
    """
    from seat_booking.models import Seat

    if db.query(Seat).count() > 0:
        return 0
    try:
        for seat_number in range(1, total_seats + 1):
            row_number = (seat_number - 1) // seats_per_row + 1
            db.add(Seat(seat_number=seat_number, row_number=row_number))
        db.commit()
    except Exception:
        db.rollback()
        logger.exception("Seeding the seat pool failed")
        raise
    logger.info(f"Seeded {total_seats} seats ({seats_per_row} per row)")
    return total_seats


def init_db() -> None:
    # models must be imported so their tables are registered on Base.metadata
    from seat_booking import models  # noqa: F401

    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        seed_seats(db, settings.TOTAL_SEATS, settings.SEATS_PER_ROW)
    finally:
        db.close()

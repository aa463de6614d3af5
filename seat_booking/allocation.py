"""Seat allocation and the booking transaction.

A request for ``n`` seats is served from the lowest-numbered row that still has
at least ``n`` free seats. When no single row can hold the group, the ``n``
lowest-numbered free seats in the whole pool are used instead. Every chosen
seat is claimed with an UPDATE guarded by ``booked_by IS NULL``; if any guard
fails (a concurrent booking got there first) the whole transaction is rolled
back, so a request books either all of its seats or none of them.
"""

from typing import List, Optional

from loguru import logger
from sqlalchemy import func, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from seat_booking.exceptions import (
    BookingError,
    BookingFailedError,
    NotEnoughSeatsError,
    NotFoundError,
    SeatConflictError,
    SeatsFullyBookedError,
)
from seat_booking.models import Seat, User, utcnow


# -----------------------------
# Seat selection (per-row first, then nearest overall)
# -----------------------------

def count_available(db: Session) -> int:
    return db.query(func.count(Seat.seat_number)).filter(Seat.booked_by.is_(None)).scalar()


def find_row_block(db: Session, k: int) -> Optional[List[int]]:
    # returns the first k free seat numbers of the lowest row that fits them, or None
    row = (
        db.query(Seat.row_number)
        .filter(Seat.booked_by.is_(None))
        .group_by(Seat.row_number)
        .having(func.count(Seat.seat_number) >= k)
        .order_by(Seat.row_number)
        .first()
    )
    if row is None:
        return None
    seats = (
        db.query(Seat.seat_number)
        .filter(Seat.row_number == row.row_number, Seat.booked_by.is_(None))
        .order_by(Seat.seat_number)
        .limit(k)
        .all()
    )
    return [s.seat_number for s in seats]


def find_nearest_seats(db: Session, k: int) -> List[int]:
    seats = (
        db.query(Seat.seat_number)
        .filter(Seat.booked_by.is_(None))
        .order_by(Seat.seat_number)
        .limit(k)
        .all()
    )
    return [s.seat_number for s in seats]


def choose_seats(db: Session, k: int) -> List[int]:
    return find_row_block(db, k) or find_nearest_seats(db, k)


# -----------------------------
# Booking transaction
# -----------------------------

def book_seats(db: Session, user_id: int, seat_count: int) -> List[int]:
    if seat_count < 1:
        raise BookingError("seat_count must be >= 1")
    try:
        if db.get(User, user_id) is None:
            raise NotFoundError("User not found.")

        available = count_available(db)
        if available == 0:
            raise SeatsFullyBookedError()
        if available < seat_count:
            raise NotEnoughSeatsError(seat_count, available)

        seat_numbers = choose_seats(db, seat_count)
        # the pool may have shrunk since it was counted
        if len(seat_numbers) < seat_count:
            raise NotEnoughSeatsError(seat_count, len(seat_numbers))
        now = utcnow()
        for seat_number in seat_numbers:
            result = db.execute(
                update(Seat)
                .where(Seat.seat_number == seat_number, Seat.booked_by.is_(None))
                .values(booked_by=user_id, booked_at=now)
            )
            if result.rowcount != 1:
                raise SeatConflictError(seat_number)
        db.commit()
    except BookingError:
        db.rollback()
        raise
    except SQLAlchemyError as e:
        db.rollback()
        logger.opt(exception=e).error(f"Booking failed for user {user_id}, transaction rolled back")
        raise BookingFailedError() from e

    logger.info(f"User {user_id} booked seats {seat_numbers}")
    return seat_numbers


def list_seats(db: Session) -> List[Seat]:
    return db.query(Seat).order_by(Seat.seat_number).all()


def reset_bookings(db: Session) -> int:
    try:
        result = db.execute(
            update(Seat)
            .where(Seat.booked_by.is_not(None))
            .values(booked_by=None, booked_at=None)
        )
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.opt(exception=e).error("Resetting bookings failed, transaction rolled back")
        raise BookingFailedError() from e
    logger.info(f"Reset bookings, {result.rowcount} seat(s) released")
    return result.rowcount

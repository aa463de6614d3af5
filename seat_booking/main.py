"""
Seat booking API.

Users register and log in with email/password, then reserve seats from a fixed
pool. Admins (user_type 1) can release every booking at once.

How to run locally:
1. Install the package:
   pip install -e .

2. Run:
   python -m seat_booking.main

3. Open docs: http://127.0.0.1:8000/docs
"""

from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from seat_booking import allocation
from seat_booking.config import settings
from seat_booking.database import get_db, init_db
from seat_booking.exceptions import BookingError, ForbiddenError, register_exception_handlers
from seat_booking.logger_config import configure_logging
from seat_booking.models import User, UserType
from seat_booking.schemas import (
    BookSeatsRequest,
    BookSeatsResponse,
    LoginRequest,
    LoginResponse,
    MessageResponse,
    RegisterRequest,
    ResetBookingsRequest,
    ResetBookingsResponse,
    SeatInfo,
    SeatListResponse,
    UserInfo,
)
from seat_booking.security import hash_password, verify_password


configure_logging()


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    logger.info(f"{settings.PROJECT_NAME} {settings.VERSION} started")
    yield


app = FastAPI(title=settings.PROJECT_NAME, version=settings.VERSION, lifespan=lifespan)

if settings.cors_origins:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

register_exception_handlers(app)


# -----------------------------
# Auth endpoints
# -----------------------------
@app.post("/api/register", status_code=201, response_model=MessageResponse)
def register(payload: RegisterRequest, db: Session = Depends(get_db)):
    # check the email first so the common case never reaches the unique constraint
    if db.query(User).filter(User.email == payload.email).first():
        raise BookingError("Email already exists.")
    user = User(
        name=payload.name,
        email=payload.email,
        password=hash_password(payload.password),
        user_type=UserType.customer.value,
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise BookingError("Email already exists.")
    logger.info(f"Registered user {user.id} <{user.email}>")
    return MessageResponse(message="User registered successfully.")


@app.post("/api/login", response_model=LoginResponse)
def login(payload: LoginRequest, db: Session = Depends(get_db)):
    user = db.query(User).filter(User.email == payload.email).first()
    if not user:
        raise BookingError("User not found. Please check your credentials.")
    if not verify_password(payload.password, user.password):
        logger.warning(f"Failed login for user {user.id}")
        raise BookingError("Incorrect password. Please try again.")
    return LoginResponse(
        message="Login successful.",
        user=UserInfo(id=user.id, name=user.name, email=user.email, user_type=user.user_type),
    )


# -----------------------------
# Seat endpoints
# -----------------------------
@app.post("/api/book-seats", response_model=BookSeatsResponse)
def book_seats(req: BookSeatsRequest, db: Session = Depends(get_db)):
    seats = allocation.book_seats(db, req.user_id, req.seat_count)
    return BookSeatsResponse(message="Booking successful", seats=seats)


@app.get("/api/fetch-booked-seats", response_model=SeatListResponse)
def fetch_booked_seats(db: Session = Depends(get_db)):
    seats = allocation.list_seats(db)
    return SeatListResponse(
        message="Booked seats fetched successfully.",
        result=[
            SeatInfo(seat_number=s.seat_number, row_number=s.row_number, booked_by=s.booked_by)
            for s in seats
        ],
    )


@app.post("/api/reset-bookings", response_model=ResetBookingsResponse)
def reset_bookings(req: ResetBookingsRequest, db: Session = Depends(get_db)):
    if req.user_type != UserType.admin.value:
        raise ForbiddenError("Invalid user, not allowed to reset bookings.")
    released = allocation.reset_bookings(db)
    return ResetBookingsResponse(message="Seats reset successfully.", released=released)


# -----------------------------
# Run app
# -----------------------------
if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=settings.HOST, port=settings.PORT)

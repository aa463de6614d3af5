import enum
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from seat_booking.database import Base


def utcnow():
    return datetime.now(timezone.utc)


class UserType(int, enum.Enum):
    admin = 1
    customer = 2


class User(Base):
    __tablename__ = "users"
    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    email = Column(String, nullable=False, unique=True, index=True)
    password = Column(String, nullable=False)  # bcrypt hash
    user_type = Column(Integer, nullable=False, default=UserType.customer.value)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    seats = relationship("Seat", back_populates="owner")


class Seat(Base):
    __tablename__ = "seats"
    seat_number = Column(Integer, primary_key=True, autoincrement=False)
    row_number = Column(Integer, nullable=False, index=True)
    # NULL means the seat is available
    booked_by = Column(Integer, ForeignKey("users.id"), nullable=True, index=True)
    booked_at = Column(DateTime(timezone=True), nullable=True)
    owner = relationship("User", back_populates="seats")

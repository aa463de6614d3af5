import re
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from seat_booking.config import settings
from seat_booking.exceptions import MISSING_PARAMETERS


EMAIL_RE = re.compile(r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}")
PASSWORD_RE = re.compile(r"(?=.*[A-Z])(?=.*\d)(?=.*[@$!%*?&])[A-Za-z\d@$!%*?&]{8,}")
NAME_SPECIAL_CHARS_RE = re.compile(r"[!@#$%^&*()_+=<>?,./:;\"{}\[\]|\\]")

INVALID_EMAIL = "Invalid Email, Please Try Again."
INVALID_NAME = "Invalid Name, Please Try Again."
WEAK_PASSWORD = (
    "Password must be at least 8 characters long and include at least one uppercase "
    "letter, one number, and one special character."
)
PASSWORDS_DIFFER = "Password and Confirm Password are not same."

# ids are stored as 64-bit integers
INT64_MAX = 2**63 - 1


def _required(v):
    if isinstance(v, str) and not v.strip():
        raise ValueError(MISSING_PARAMETERS)
    return v


def _check_email(v: str) -> str:
    if not EMAIL_RE.fullmatch(v):
        raise ValueError(INVALID_EMAIL)
    return v


def _check_password(v: str) -> str:
    if not PASSWORD_RE.fullmatch(v):
        raise ValueError(WEAK_PASSWORD)
    return v


# -----------------------------
# Auth
# -----------------------------
class RegisterRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str
    email: str
    password: str
    confirm_password: str = Field(..., alias="confirmPassword")

    @model_validator(mode="before")
    @classmethod
    def name_and_passwords_first(cls, data):
        # name and password confirmation are checked before the email and password policy
        if not isinstance(data, dict):
            return data
        name = data.get("name")
        password = data.get("password")
        confirm = data.get("confirmPassword", data.get("confirm_password"))
        fields = (name, data.get("email"), password, confirm)
        if any(not isinstance(v, str) or not v.strip() for v in fields):
            return data  # field validators report what is missing
        if NAME_SPECIAL_CHARS_RE.search(name):
            raise ValueError(INVALID_NAME)
        if password != confirm:
            raise ValueError(PASSWORDS_DIFFER)
        return data

    @field_validator("name", "email", "password", "confirm_password", mode="before")
    @classmethod
    def not_blank(cls, v):
        return _required(v)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        return v.strip()

    @field_validator("email")
    @classmethod
    def valid_email(cls, v: str) -> str:
        return _check_email(v)

    @field_validator("password")
    @classmethod
    def strong_password(cls, v: str) -> str:
        return _check_password(v)


class LoginRequest(BaseModel):
    email: str
    password: str

    @field_validator("email", "password", mode="before")
    @classmethod
    def not_blank(cls, v):
        return _required(v)

    @field_validator("email")
    @classmethod
    def valid_email(cls, v: str) -> str:
        return _check_email(v)

    @field_validator("password")
    @classmethod
    def strong_password(cls, v: str) -> str:
        return _check_password(v)


class UserInfo(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: int
    name: str
    email: str
    user_type: int = Field(..., serialization_alias="userType")


class MessageResponse(BaseModel):
    success: bool = True
    message: str


class LoginResponse(MessageResponse):
    user: UserInfo


# -----------------------------
# Seats
# -----------------------------
class BookSeatsRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    user_id: int = Field(..., alias="userId", ge=1, le=INT64_MAX)
    seat_count: int = Field(..., alias="seatCount")
    user_type: int = Field(..., alias="userType", ge=0, le=INT64_MAX)

    @field_validator("user_id", "seat_count", "user_type", mode="before")
    @classmethod
    def not_blank(cls, v):
        if v is None:
            raise ValueError(MISSING_PARAMETERS)
        return _required(v)

    @field_validator("seat_count")
    @classmethod
    def seat_count_in_range(cls, v: int) -> int:
        limit = settings.MAX_SEATS_PER_BOOKING
        if not 1 <= v <= limit:
            raise ValueError(f"You can book between 1 and {limit} seats at a time.")
        return v


class BookSeatsResponse(MessageResponse):
    seats: List[int]


class SeatInfo(BaseModel):
    seat_number: int
    row_number: int
    booked_by: Optional[int] = None


class SeatListResponse(MessageResponse):
    result: List[SeatInfo]


class ResetBookingsRequest(BaseModel):
    user_type: int = Field(..., ge=0, le=INT64_MAX)

    @field_validator("user_type", mode="before")
    @classmethod
    def not_blank(cls, v):
        if v is None:
            raise ValueError(MISSING_PARAMETERS)
        return _required(v)


class ResetBookingsResponse(MessageResponse):
    released: int

from pathlib import Path
from typing import List, Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


_PROJECT_ROOT = Path(__file__).resolve().parents[1]
_ENV_PATH = _PROJECT_ROOT / ".env"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="SEAT_BOOKING_",
        env_file=str(_ENV_PATH),
        env_ignore_empty=True,
        extra="ignore",
    )

    PROJECT_NAME: str = "Seat Booking"
    VERSION: str = "0.1.0"

    # Database
    DATABASE_URL: str = "sqlite:///./seat_booking.db"
    DB_ECHO: bool = False

    # Seat pool
    TOTAL_SEATS: int = 80
    SEATS_PER_ROW: int = 7
    MAX_SEATS_PER_BOOKING: int = 7

    # Security
    BCRYPT_ROUNDS: int = 12

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_DIR: Optional[str] = None

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 8000
    # comma separated, e.g. "http://localhost:3000,https://seats.example.com"
    BACKEND_CORS_ORIGINS: str = ""

    @property
    def cors_origins(self) -> List[str]:
        return [i.strip() for i in self.BACKEND_CORS_ORIGINS.split(",") if i.strip()]

    @field_validator("TOTAL_SEATS", "SEATS_PER_ROW", "MAX_SEATS_PER_BOOKING")
    @classmethod
    def must_be_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("must be at least 1")
        return v

    @field_validator("BCRYPT_ROUNDS")
    @classmethod
    def bcrypt_rounds_in_range(cls, v: int) -> int:
        if not 4 <= v <= 31:
            raise ValueError("bcrypt rounds must be between 4 and 31")
        return v


settings = Settings()

from typing import Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Database
    database_url: str = "sqlite:///carrental.db"

    # CORS
    frontend_url: str = "http://localhost:5173"

    # JWT
    jwt_secret_key: str = "change-me-in-production"
    jwt_algorithm: str = "HS256"
    jwt_expiration_minutes: int = 24 * 60

    # Password hashing
    bcrypt_rounds: int = 12

    # Audit service (separate process, see auditlog/)
    audit_enabled: bool = True
    audit_service_url: str = "http://localhost:8080/api/audits"
    audit_timeout_seconds: float = 5.0

    # Booking policy
    # False: closed intervals, a vehicle returned on day X cannot be picked up on day X.
    # True: half-open intervals, same-day turnover is allowed.
    booking_same_day_turnover: bool = False

    # Scheduled completion of bookings whose return date has passed
    booking_completion_job_enabled: bool = True
    booking_completion_interval_minutes: int = 60

    # Logging
    log_level: str = "INFO"

    # Flask environment
    flask_env: str = "development"

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore"
    )

    def is_dev(self) -> bool:
        """True when running in development mode."""
        return (self.flask_env or "").strip().lower() == "development"

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, value: Optional[str]) -> str:
        if not value:
            return "INFO"
        return str(value).strip().upper()

    @field_validator("booking_completion_interval_minutes")
    @classmethod
    def validate_interval(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("booking_completion_interval_minutes must be > 0")
        return value


settings = Settings()

"""
Environment-specific configuration settings.

Everything is read from Lambda environment variables; defaults suit a
single warm container talking to a small RDS instance.
"""

from dataclasses import dataclass
import os
from typing import Optional


def _env_flag(name: str, default: str = "false") -> bool:
    return os.environ.get(name, default).strip().lower() in ("1", "true", "yes")


@dataclass
class Settings:
    """Runtime settings for the booking service."""

    # Environment
    environment: str = "dev"

    # Database connection (DATABASE_URL wins over the secret)
    database_url: Optional[str] = None
    db_secret_arn: Optional[str] = None
    db_pool_size: int = 1
    db_max_overflow: int = 2
    db_pool_recycle_seconds: int = 300

    # Booking policy
    enforce_single_booking: bool = False

    @classmethod
    def from_environment(cls) -> "Settings":
        """Load settings from environment variables."""
        env = os.environ.get("ENVIRONMENT", "dev")

        # Production overrides
        pool_size_default = "5" if env == "prod" else "1"
        max_overflow_default = "10" if env == "prod" else "2"

        return cls(
            environment=env,
            database_url=os.environ.get("DATABASE_URL") or None,
            db_secret_arn=os.environ.get("DB_SECRET_ARN") or None,
            db_pool_size=int(os.environ.get("DB_POOL_SIZE", pool_size_default)),
            db_max_overflow=int(os.environ.get("DB_MAX_OVERFLOW", max_overflow_default)),
            enforce_single_booking=_env_flag("ENFORCE_SINGLE_BOOKING"),
        )

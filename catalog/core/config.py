"""
Deployment configuration for the catalog edit guard.
Values are read from the environment once per process; helpers re-read where
tests need to redirect them.
"""

import os
from dataclasses import dataclass
from datetime import timedelta
from pathlib import Path

# Database path configuration
DB_PATH = os.getenv("DB_PATH", "./data/catalog.db")

DEBUG = os.getenv("DEBUG", "false").lower() == "true"

# Default self-service edit window for record creators, in days.
# Overridden by GRACE_PERIOD_DAYS, parsed and validated in PolicyConfig.from_env.
GRACE_PERIOD_DAYS = 7

# Version string
VERSION = "1.0.0"


@dataclass(frozen=True)
class PolicyConfig:
    """Settings handed to the ownership policy at construction time."""
    grace_period: timedelta = timedelta(days=GRACE_PERIOD_DAYS)

    @classmethod
    def from_days(cls, days: int) -> 'PolicyConfig':
        if days < 0:
            raise ValueError(f"grace period must be >= 0 days, got {days}")
        return cls(grace_period=timedelta(days=days))

    @classmethod
    def from_env(cls) -> 'PolicyConfig':
        """Build from GRACE_PERIOD_DAYS, falling back to the default window."""
        raw = os.getenv("GRACE_PERIOD_DAYS")
        if raw is None or not raw.strip():
            return cls.from_days(GRACE_PERIOD_DAYS)
        try:
            days = int(raw)
        except ValueError:
            raise ValueError(f"GRACE_PERIOD_DAYS must be an integer, got {raw!r}") from None
        return cls.from_days(days)


def debug_enabled():
    """Check if debug mode is enabled."""
    return os.getenv("DEBUG", "false").lower() == "true"


def get_db_path() -> str:
    """Current database path (honours DB_PATH overrides made after import)."""
    return os.getenv("DB_PATH", DB_PATH)


def ensure_db_directory():
    """Ensure the database directory exists."""
    Path(get_db_path()).parent.mkdir(parents=True, exist_ok=True)


def validate_config():
    """Validate configuration and return any issues."""
    issues = []

    try:
        PolicyConfig.from_env()
    except ValueError as e:
        issues.append(str(e))

    if not get_db_path().strip():
        issues.append("DB_PATH must not be empty")

    return issues

"""Access policy read from Django settings.

Settings live under ``BOOTH_ACCESS`` in config/settings.py. Missing keys fall
back to the defaults below.
"""

from dataclasses import dataclass
from datetime import timedelta

from django.conf import settings

DEFAULTS = {
    "SESSION_TTL_HOURS": 24,
    "MAX_FAILED_ATTEMPTS": 5,
    "RATE_LIMIT_WINDOW_MINUTES": 60,
    "DEFAULT_CODE_EXPIRY_DAYS": 30,
    "CODE_MAX_ATTEMPTS": 10,
    "ATTEMPT_RETENTION_DAYS": 7,
    "STATS_CACHE_SECONDS": 60,
    "LOG_JSON": False,
    "LOG_LEVEL": "INFO",
}

ONE_SHIFT_HOURS = 8


@dataclass(frozen=True)
class AccessPolicy:
    """Tunable limits for booth access."""

    session_ttl: timedelta = timedelta(hours=24)
    max_failed_attempts: int = 5
    rate_limit_window: timedelta = timedelta(minutes=60)
    default_code_expiry_days: int = 30
    code_max_attempts: int = 10
    attempt_retention: timedelta = timedelta(days=7)

    def __post_init__(self) -> None:
        if self.session_ttl <= timedelta(0):
            raise ValueError("Session TTL must be positive")
        if self.max_failed_attempts < 1:
            raise ValueError("Failed-attempt threshold must be at least 1")
        if self.code_max_attempts < 1:
            raise ValueError("Code generation needs at least one attempt")


def get_setting(name: str):
    overrides = getattr(settings, "BOOTH_ACCESS", {})
    return overrides.get(name, DEFAULTS[name])


def get_policy() -> AccessPolicy:
    """Build the policy from current settings."""
    return AccessPolicy(
        session_ttl=timedelta(hours=get_setting("SESSION_TTL_HOURS")),
        max_failed_attempts=get_setting("MAX_FAILED_ATTEMPTS"),
        rate_limit_window=timedelta(minutes=get_setting("RATE_LIMIT_WINDOW_MINUTES")),
        default_code_expiry_days=get_setting("DEFAULT_CODE_EXPIRY_DAYS"),
        code_max_attempts=get_setting("CODE_MAX_ATTEMPTS"),
        attempt_retention=timedelta(days=get_setting("ATTEMPT_RETENTION_DAYS")),
    )

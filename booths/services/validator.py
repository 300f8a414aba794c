"""Booth code validation.

Every call writes exactly one CodeAttempt, whatever the outcome, so the
audit trail and the rate limiter see all submissions.
"""

from collections.abc import Callable
from datetime import datetime

from django.utils import timezone

from booths.domain import AttemptFailure, Booth, CodeAttempt
from booths.domain.errors import (
    BoothInactiveError,
    CodeExpiredError,
    CodeNotFoundError,
    DomainError,
    RateLimitedError,
)
from booths.domain.models import ValidationResult
from booths.logging import get_logger
from booths.services.rate_limiter import RateLimiter
from booths.stores.interfaces import BoothStore

logger = get_logger(__name__)


class CodeValidator:
    """Checks a submitted code against the rate limit and the booth table."""

    def __init__(
        self,
        store: BoothStore,
        rate_limiter: RateLimiter,
        clock: Callable[[], datetime] = timezone.now,
    ) -> None:
        self._store = store
        self._rate_limiter = rate_limiter
        self._clock = clock

    def validate(
        self, code: str, address: str | None, user_agent: str | None = None
    ) -> ValidationResult:
        """Validate a code, recording the attempt.

        Steps run in order and stop at the first failure: rate limit, exact
        code match, code expiry, booth active flag. A blocked address never
        reaches the booth lookup.
        """
        now = self._clock()

        if self._rate_limiter.is_blocked(address):
            return self._fail(code, address, user_agent, now, AttemptFailure.RATE_LIMITED)

        booth = self._store.find_booth_by_code(code)
        if booth is None:
            return self._fail(code, address, user_agent, now, AttemptFailure.NOT_FOUND)

        if booth.code_expired(now):
            return self._fail(code, address, user_agent, now, AttemptFailure.EXPIRED, booth)

        if not booth.is_active:
            return self._fail(code, address, user_agent, now, AttemptFailure.INACTIVE, booth)

        self._rate_limiter.record_attempt(
            CodeAttempt(
                code=code,
                address=address,
                attempted_at=now,
                success=True,
                booth_id=booth.id,
                user_agent=user_agent,
            )
        )
        logger.info("code_validated", booth_id=str(booth.id), address=address)
        return ValidationResult(is_valid=True, booth_id=booth.id, booth_name=booth.name)

    def require_valid(
        self, code: str, address: str | None, user_agent: str | None = None
    ) -> ValidationResult:
        """Validate a code and raise the matching domain error if it fails.

        Raises:
            RateLimitedError: If the address is blocked.
            CodeNotFoundError: If no booth holds the code.
            CodeExpiredError: If the code is past its expiry.
            BoothInactiveError: If the booth is deactivated.
        """
        result = self.validate(code, address, user_agent)
        if not result.is_valid:
            raise self._error_for(result.reason, address)
        return result

    def _fail(
        self,
        code: str,
        address: str | None,
        user_agent: str | None,
        now: datetime,
        reason: AttemptFailure,
        booth: Booth | None = None,
    ) -> ValidationResult:
        self._rate_limiter.record_attempt(
            CodeAttempt(
                code=code,
                address=address,
                attempted_at=now,
                success=False,
                booth_id=booth.id if booth else None,
                reason=reason,
                user_agent=user_agent,
            )
        )
        logger.warning("code_attempt_failed", reason=reason.value, address=address)
        return ValidationResult(is_valid=False, reason=reason)

    def _error_for(self, reason: AttemptFailure | None, address: str | None) -> DomainError:
        if reason is AttemptFailure.RATE_LIMITED:
            return RateLimitedError(self._rate_limiter.retry_after(address))
        if reason is AttemptFailure.EXPIRED:
            return CodeExpiredError()
        if reason is AttemptFailure.INACTIVE:
            return BoothInactiveError()
        return CodeNotFoundError()

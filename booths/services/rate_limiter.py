"""Sliding-window limiter over failed code attempts."""

from collections.abc import Callable
from datetime import datetime, timedelta

from django.utils import timezone

from booths.domain import CodeAttempt
from booths.stores.interfaces import BoothStore


class RateLimiter:
    """Blocks an address once it has too many recent failed attempts.

    The window trails the moment of the call, so the count always covers
    exactly the last ``window``. Successful attempts never count.
    """

    def __init__(
        self,
        store: BoothStore,
        max_failures: int = 5,
        window: timedelta = timedelta(hours=1),
        clock: Callable[[], datetime] = timezone.now,
    ) -> None:
        self._store = store
        self._max_failures = max_failures
        self._window = window
        self._clock = clock

    def record_attempt(self, attempt: CodeAttempt) -> None:
        self._store.add_attempt(attempt)

    def is_blocked(self, address: str | None) -> bool:
        since = self._clock() - self._window
        return self._store.count_failed_attempts(address, since) >= self._max_failures

    def retry_after(self, address: str | None) -> timedelta:
        """How long until the address drops back under the threshold.

        Assumes no further attempts arrive in the meantime.
        """
        now = self._clock()
        times = self._store.failed_attempt_times(address, now - self._window)
        if len(times) < self._max_failures:
            return timedelta(0)
        release = times[len(times) - self._max_failures] + self._window
        return max(release - now, timedelta(0))

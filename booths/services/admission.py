"""Admission control for concurrent operators per booth."""

from collections.abc import Callable
from typing import TypeVar

from booths.domain import Booth, BoothId
from booths.domain.errors import AdmissionDeniedError, BoothNotFoundError
from booths.logging import get_logger
from booths.stores.interfaces import BoothStore

logger = get_logger(__name__)

T = TypeVar("T")


class AdmissionController:
    """Caps how many operations may be active on a booth at once."""

    def __init__(self, store: BoothStore) -> None:
        self._store = store

    def can_admit(self, booth_id: BoothId) -> bool:
        """Point-in-time check. Use admit() to act on the answer safely."""
        booth = self._store.get_booth(booth_id)
        if booth is None:
            raise BoothNotFoundError(str(booth_id))
        return self._has_room(booth)

    def admit(self, booth_id: BoothId, create: Callable[[Booth], T]) -> T:
        """Run ``create`` only if the booth has room, atomically with the check.

        The booth row stays locked from the recount until ``create`` has
        written the new operation, so concurrent admits cannot overshoot
        ``max_operators``.

        Raises:
            BoothNotFoundError: If the booth does not exist.
            AdmissionDeniedError: If the booth is at capacity.
        """
        with self._store.atomic():
            booth = self._store.lock_booth(booth_id)
            if booth is None:
                raise BoothNotFoundError(str(booth_id))
            if not self._has_room(booth):
                logger.info(
                    "admission_denied",
                    booth_id=str(booth_id),
                    max_operators=booth.max_operators,
                )
                raise AdmissionDeniedError(booth.max_operators)
            return create(booth)

    def _has_room(self, booth: Booth) -> bool:
        return self._store.count_active_operations(booth.id) < booth.max_operators

"""Store interfaces (repository pattern).

Stores must be swappable and return domain models. Every invariant that
spans rows (operator capacity, single-winner close) is guarded by the caller
holding ``atomic()`` together with the ``lock_*`` lookups.
"""

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from datetime import date, datetime

from booths.domain import (
    Booth,
    BoothId,
    BoothOperation,
    CodeAttempt,
    DailyStat,
    OperationId,
    OperatorSession,
    ParticipantTally,
)
from booths.domain.models import DailyStatIncrement, OperationFilter


class BoothStore(ABC):
    """Interface for booth access persistence operations."""

    @abstractmethod
    def atomic(self) -> AbstractContextManager:
        """Return a context manager that serialises the enclosed work."""
        ...

    # Booths

    @abstractmethod
    def get_booth(self, booth_id: BoothId) -> Booth | None:
        """Return a booth by ID, or None if not found."""
        ...

    @abstractmethod
    def lock_booth(self, booth_id: BoothId) -> Booth | None:
        """Like get_booth, but holds the row until the enclosing atomic() ends."""
        ...

    @abstractmethod
    def find_booth_by_code(self, code: str) -> Booth | None:
        """Return the booth holding exactly this code, or None."""
        ...

    @abstractmethod
    def code_exists(self, code: str) -> bool:
        """Check if any booth currently holds the code."""
        ...

    @abstractmethod
    def list_booths(self) -> list[Booth]:
        """Return all booths ordered by name."""
        ...

    @abstractmethod
    def set_booth_code(
        self, booth_id: BoothId, code: str | None, expires_at: datetime | None
    ) -> Booth:
        """Write (or clear) a booth's code.

        Raises:
            BoothNotFoundError: If the booth does not exist.
            CodeConflictError: If another booth already holds the code.
        """
        ...

    # Code attempts

    @abstractmethod
    def add_attempt(self, attempt: CodeAttempt) -> None:
        """Append an attempt to the audit log."""
        ...

    @abstractmethod
    def count_failed_attempts(self, address: str | None, since: datetime) -> int:
        """Count failed attempts from an address strictly after ``since``."""
        ...

    @abstractmethod
    def failed_attempt_times(self, address: str | None, since: datetime) -> list[datetime]:
        """Return failed attempt times strictly after ``since``, oldest first."""
        ...

    @abstractmethod
    def purge_attempts(self, before: datetime) -> int:
        """Delete attempts older than ``before``; return how many."""
        ...

    # Operations

    @abstractmethod
    def add_operation(self, operation: BoothOperation) -> BoothOperation:
        """Persist a new operation."""
        ...

    @abstractmethod
    def get_operation(self, operation_id: OperationId) -> BoothOperation | None:
        """Return an operation by ID, or None if not found."""
        ...

    @abstractmethod
    def lock_operation(self, operation_id: OperationId) -> BoothOperation | None:
        """Like get_operation, but holds the row until the enclosing atomic() ends."""
        ...

    @abstractmethod
    def count_active_operations(self, booth_id: BoothId) -> int:
        """Count operations on a booth that are still active."""
        ...

    @abstractmethod
    def close_operation(
        self, operation_id: OperationId, ended_at: datetime, total_participants: int
    ) -> BoothOperation | None:
        """Close an active operation.

        Returns the closed operation, or None if it was not active (someone
        else already closed it).
        """
        ...

    @abstractmethod
    def list_operations(self, criteria: OperationFilter) -> list[BoothOperation]:
        """Return operations matching the filter, newest first."""
        ...

    # Sessions

    @abstractmethod
    def add_session(self, session: OperatorSession) -> None:
        """Persist a new session."""
        ...

    @abstractmethod
    def get_session(self, token: str) -> OperatorSession | None:
        """Return a session by token, or None if not found."""
        ...

    @abstractmethod
    def save_session(self, session: OperatorSession) -> None:
        """Update a session's expiry and activity timestamps."""
        ...

    @abstractmethod
    def delete_session(self, token: str) -> bool:
        """Delete a session; return whether a row was removed."""
        ...

    @abstractmethod
    def purge_sessions(self, before: datetime) -> int:
        """Delete sessions that expired before ``before``; return how many."""
        ...

    # Daily stats

    @abstractmethod
    def add_to_daily_stat(
        self, booth_id: BoothId, stat_date: date, increment: DailyStatIncrement
    ) -> DailyStat:
        """Upsert a rollup row, adding the increment to existing values."""
        ...

    @abstractmethod
    def get_daily_stat(self, booth_id: BoothId, stat_date: date) -> DailyStat | None:
        """Return a rollup row, or None if nothing was recorded that day."""
        ...


class ParticipantCounter(ABC):
    """Interface onto the participant registration store."""

    @abstractmethod
    def tally(self, booth_id: BoothId, start: datetime, end: datetime) -> ParticipantTally:
        """Count participants registered at a booth within ``[start, end)``."""
        ...

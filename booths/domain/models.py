"""Domain models representing persisted state.

These are pure domain objects with no API input rules.
Django ORM models are in booths/models.py (persistence layer).
"""

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from enum import Enum

from booths.domain.value_objects import BoothId, Duration, OperationId


class AttemptFailure(Enum):
    """Reasons a code attempt is rejected."""

    RATE_LIMITED = "rate_limited"
    NOT_FOUND = "not_found"
    EXPIRED = "expired"
    INACTIVE = "inactive"


@dataclass(frozen=True)
class Booth:
    """Domain representation of a Booth."""

    id: BoothId
    name: str
    code: str | None
    code_expires_at: datetime | None
    is_active: bool
    max_operators: int = 3

    def code_expired(self, now: datetime) -> bool:
        return self.code_expires_at is not None and self.code_expires_at < now


@dataclass(frozen=True)
class BoothOperation:
    """One operator's tenure at a booth."""

    id: OperationId
    booth_id: BoothId
    operator_name: str
    operator_contact: str | None
    started_at: datetime
    ended_at: datetime | None = None
    is_active: bool = True
    total_participants: int = 0
    operator_email: str | None = None
    operator_organization: str | None = None
    notes: str | None = None

    def duration(self, now: datetime) -> Duration:
        """Elapsed time until close, or until ``now`` while still active."""
        end = self.ended_at or now
        seconds = max((end - self.started_at).total_seconds(), 0)
        return Duration(total_minutes=int(seconds // 60))


@dataclass(frozen=True)
class OperatorSession:
    """Bearer-token credential bound to one operation."""

    token: str
    operation_id: OperationId
    created_at: datetime
    expires_at: datetime
    last_activity_at: datetime
    address: str | None = None

    def is_expired(self, now: datetime) -> bool:
        return now > self.expires_at


@dataclass(frozen=True)
class CodeAttempt:
    """One audited code submission."""

    code: str
    address: str | None
    attempted_at: datetime
    success: bool
    booth_id: BoothId | None = None
    reason: AttemptFailure | None = None
    user_agent: str | None = None


@dataclass(frozen=True)
class ParticipantTally:
    """Participant counts for a booth over a time range."""

    total: int = 0
    male: int = 0
    female: int = 0
    elementary: int = 0
    middle: int = 0
    high: int = 0


@dataclass(frozen=True)
class DailyStatIncrement:
    """Amounts added to a daily rollup when an operation closes."""

    participants: ParticipantTally
    operator_count: int
    operation_hours: Decimal


@dataclass(frozen=True)
class DailyStat:
    """Per-booth, per-day rollup."""

    booth_id: BoothId
    stat_date: date
    total_participants: int = 0
    male_count: int = 0
    female_count: int = 0
    elementary_count: int = 0
    middle_count: int = 0
    high_count: int = 0
    operator_count: int = 0
    operation_hours: Decimal = Decimal("0.00")


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of validating a booth code."""

    is_valid: bool
    booth_id: BoothId | None = None
    booth_name: str | None = None
    reason: AttemptFailure | None = None


@dataclass(frozen=True)
class SessionContext:
    """A resolved session joined with its operation and booth."""

    session: OperatorSession
    operation: BoothOperation
    booth: Booth


@dataclass(frozen=True)
class SessionStart:
    """Result of a successful operator sign-in."""

    token: str
    expires_at: datetime
    booth_name: str
    operation: BoothOperation


@dataclass(frozen=True)
class SessionView:
    """What an operator sees about their current session."""

    booth_id: BoothId
    booth_name: str
    operation: BoothOperation
    expires_at: datetime
    last_activity_at: datetime
    duration: Duration
    participants: ParticipantTally


@dataclass(frozen=True)
class OperationSummary:
    """Closing summary returned when an operation ends."""

    operation: BoothOperation
    duration: Duration
    participants: int


@dataclass(frozen=True)
class OperationFilter:
    """Criteria for listing operation history."""

    booth_id: BoothId | None = None
    operator_name: str | None = None
    started_from: datetime | None = None
    started_to: datetime | None = None
    is_active: bool | None = None


@dataclass(frozen=True)
class OperationStats:
    """Aggregate figures across operations."""

    total_operations: int = 0
    active_operations: int = 0
    total_operators: int = 0
    average_duration_minutes: int = 0
    total_participants: int = 0


@dataclass(frozen=True)
class CodeAssignment:
    """A code written onto a booth."""

    booth_id: BoothId
    code: str
    expires_at: datetime


@dataclass(frozen=True)
class PurgeResult:
    """Rows removed by the janitor."""

    sessions: int = 0
    attempts: int = 0


@dataclass(frozen=True)
class OperationHistoryEntry:
    """An operation together with its measured duration."""

    operation: BoothOperation
    duration: Duration
    booth_name: str | None = None

"""In-memory implementation of the stores.

Satisfies the same contract as the Django adapter for local development and
tests. A single re-entrant lock stands in for database transactions and row
locks, so ``atomic()`` blocks serialise against each other.
"""

import threading
from contextlib import AbstractContextManager
from dataclasses import replace
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
from booths.domain.errors import BoothNotFoundError, CodeConflictError
from booths.domain.models import DailyStatIncrement, OperationFilter
from booths.stores.interfaces import BoothStore, ParticipantCounter


class InMemoryBoothStore(BoothStore):
    """Process-local store backed by dicts."""

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._booths: dict[BoothId, Booth] = {}
        self._attempts: list[CodeAttempt] = []
        self._operations: dict[OperationId, BoothOperation] = {}
        self._sessions: dict[str, OperatorSession] = {}
        self._stats: dict[tuple[BoothId, date], DailyStat] = {}

    def atomic(self) -> AbstractContextManager:
        return self._lock

    def add_booth(self, booth: Booth) -> Booth:
        """Seed a booth. Administration owns booths, so this is not on the interface."""
        with self._lock:
            if booth.code is not None and self._holder_of(booth.code) not in (None, booth.id):
                raise CodeConflictError(booth.code)
            self._booths[booth.id] = booth
            return booth

    def attempts(self) -> list[CodeAttempt]:
        with self._lock:
            return list(self._attempts)

    def _holder_of(self, code: str) -> BoothId | None:
        for booth in self._booths.values():
            if booth.code == code:
                return booth.id
        return None

    # Booths

    def get_booth(self, booth_id: BoothId) -> Booth | None:
        with self._lock:
            return self._booths.get(booth_id)

    def lock_booth(self, booth_id: BoothId) -> Booth | None:
        return self.get_booth(booth_id)

    def find_booth_by_code(self, code: str) -> Booth | None:
        with self._lock:
            holder = self._holder_of(code)
            return self._booths[holder] if holder else None

    def code_exists(self, code: str) -> bool:
        with self._lock:
            return self._holder_of(code) is not None

    def list_booths(self) -> list[Booth]:
        with self._lock:
            return sorted(self._booths.values(), key=lambda b: b.name)

    def set_booth_code(
        self, booth_id: BoothId, code: str | None, expires_at: datetime | None
    ) -> Booth:
        with self._lock:
            booth = self._booths.get(booth_id)
            if booth is None:
                raise BoothNotFoundError(str(booth_id))
            if code is not None and self._holder_of(code) not in (None, booth_id):
                raise CodeConflictError(code)
            booth = replace(booth, code=code, code_expires_at=expires_at)
            self._booths[booth_id] = booth
            return booth

    # Code attempts

    def add_attempt(self, attempt: CodeAttempt) -> None:
        with self._lock:
            self._attempts.append(attempt)

    def _failed_since(self, address: str | None, since: datetime) -> list[CodeAttempt]:
        return [
            a
            for a in self._attempts
            if a.address == address and not a.success and a.attempted_at > since
        ]

    def count_failed_attempts(self, address: str | None, since: datetime) -> int:
        with self._lock:
            return len(self._failed_since(address, since))

    def failed_attempt_times(self, address: str | None, since: datetime) -> list[datetime]:
        with self._lock:
            return sorted(a.attempted_at for a in self._failed_since(address, since))

    def purge_attempts(self, before: datetime) -> int:
        with self._lock:
            kept = [a for a in self._attempts if a.attempted_at >= before]
            removed = len(self._attempts) - len(kept)
            self._attempts = kept
            return removed

    # Operations

    def add_operation(self, operation: BoothOperation) -> BoothOperation:
        with self._lock:
            if operation.booth_id not in self._booths:
                raise BoothNotFoundError(str(operation.booth_id))
            self._operations[operation.id] = operation
            return operation

    def get_operation(self, operation_id: OperationId) -> BoothOperation | None:
        with self._lock:
            return self._operations.get(operation_id)

    def lock_operation(self, operation_id: OperationId) -> BoothOperation | None:
        return self.get_operation(operation_id)

    def count_active_operations(self, booth_id: BoothId) -> int:
        with self._lock:
            return sum(
                1
                for op in self._operations.values()
                if op.booth_id == booth_id and op.is_active
            )

    def close_operation(
        self, operation_id: OperationId, ended_at: datetime, total_participants: int
    ) -> BoothOperation | None:
        with self._lock:
            operation = self._operations.get(operation_id)
            if operation is None or not operation.is_active:
                return None
            operation = replace(
                operation,
                ended_at=ended_at,
                is_active=False,
                total_participants=total_participants,
            )
            self._operations[operation_id] = operation
            return operation

    def list_operations(self, criteria: OperationFilter) -> list[BoothOperation]:
        with self._lock:
            operations = list(self._operations.values())
        if criteria.booth_id is not None:
            operations = [op for op in operations if op.booth_id == criteria.booth_id]
        if criteria.operator_name:
            needle = criteria.operator_name.lower()
            operations = [op for op in operations if needle in op.operator_name.lower()]
        if criteria.started_from is not None:
            operations = [op for op in operations if op.started_at >= criteria.started_from]
        if criteria.started_to is not None:
            operations = [op for op in operations if op.started_at <= criteria.started_to]
        if criteria.is_active is not None:
            operations = [op for op in operations if op.is_active == criteria.is_active]
        return sorted(operations, key=lambda op: op.started_at, reverse=True)

    # Sessions

    def add_session(self, session: OperatorSession) -> None:
        with self._lock:
            self._sessions[session.token] = session

    def get_session(self, token: str) -> OperatorSession | None:
        with self._lock:
            return self._sessions.get(token)

    def save_session(self, session: OperatorSession) -> None:
        with self._lock:
            if session.token in self._sessions:
                self._sessions[session.token] = session

    def delete_session(self, token: str) -> bool:
        with self._lock:
            return self._sessions.pop(token, None) is not None

    def purge_sessions(self, before: datetime) -> int:
        with self._lock:
            stale = [t for t, s in self._sessions.items() if s.expires_at < before]
            for token in stale:
                del self._sessions[token]
            return len(stale)

    # Daily stats

    def add_to_daily_stat(
        self, booth_id: BoothId, stat_date: date, increment: DailyStatIncrement
    ) -> DailyStat:
        with self._lock:
            current = self._stats.get((booth_id, stat_date)) or DailyStat(
                booth_id=booth_id, stat_date=stat_date
            )
            tally = increment.participants
            updated = replace(
                current,
                total_participants=current.total_participants + tally.total,
                male_count=current.male_count + tally.male,
                female_count=current.female_count + tally.female,
                elementary_count=current.elementary_count + tally.elementary,
                middle_count=current.middle_count + tally.middle,
                high_count=current.high_count + tally.high,
                operator_count=current.operator_count + increment.operator_count,
                operation_hours=current.operation_hours + increment.operation_hours,
            )
            self._stats[(booth_id, stat_date)] = updated
            return updated

    def get_daily_stat(self, booth_id: BoothId, stat_date: date) -> DailyStat | None:
        with self._lock:
            return self._stats.get((booth_id, stat_date))


class InMemoryParticipantCounter(ParticipantCounter):
    """Participant registrations held in a list of ``(booth_id, registered_at, gender, level)``."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._registrations: list[tuple[BoothId, datetime, str, str]] = []

    def register(
        self,
        booth_id: BoothId,
        registered_at: datetime,
        gender: str = "other",
        school_level: str = "other",
    ) -> None:
        with self._lock:
            self._registrations.append((booth_id, registered_at, gender, school_level))

    def tally(self, booth_id: BoothId, start: datetime, end: datetime) -> ParticipantTally:
        with self._lock:
            rows = [
                (gender, level)
                for bid, at, gender, level in self._registrations
                if bid == booth_id and start <= at < end
            ]
        genders = [g for g, _ in rows]
        levels = [lv for _, lv in rows]
        return ParticipantTally(
            total=len(rows),
            male=genders.count("male"),
            female=genders.count("female"),
            elementary=levels.count("elementary"),
            middle=levels.count("middle"),
            high=levels.count("high"),
        )

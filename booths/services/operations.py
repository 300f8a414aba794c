"""Operation lifecycle: start, end, and reporting over operations.

An operation moves Pending -> Active -> Closed. Closed is terminal and the
row is kept as audit data.
"""

import uuid
from collections.abc import Callable
from datetime import datetime

from django.utils import timezone

from booths.domain import BoothId, BoothOperation, OperationId, OperatorInfo, ParticipantTally
from booths.domain.errors import InvalidOperatorInfoError, OperationNotFoundError
from booths.domain.models import (
    OperationFilter,
    OperationHistoryEntry,
    OperationStats,
    OperationSummary,
)
from booths.logging import get_logger
from booths.services.admission import AdmissionController
from booths.services.stats import StatsAggregator
from booths.stores.interfaces import BoothStore, ParticipantCounter

logger = get_logger(__name__)


def build_operator_info(
    name: str,
    contact: str | None = None,
    email: str | None = None,
    organization: str | None = None,
    notes: str | None = None,
) -> OperatorInfo:
    """Build OperatorInfo, mapping input problems to a domain error.

    Raises:
        InvalidOperatorInfoError: If the name is blank or the contact is too short.
    """
    try:
        return OperatorInfo(
            name=name,
            contact=contact,
            email=email,
            organization=organization,
            notes=notes,
        )
    except ValueError as exc:
        raise InvalidOperatorInfoError(str(exc)) from exc


class OperationLifecycle:
    """Owns booth operations while they are active."""

    def __init__(
        self,
        store: BoothStore,
        participants: ParticipantCounter,
        admission: AdmissionController | None = None,
        stats: StatsAggregator | None = None,
        clock: Callable[[], datetime] = timezone.now,
    ) -> None:
        self._store = store
        self._participants = participants
        self._admission = admission or AdmissionController(store)
        self._stats = stats or StatsAggregator(store)
        self._clock = clock

    def start(self, booth_id: BoothId, operator: OperatorInfo) -> BoothOperation:
        """Start a new active operation on a booth.

        Other active operations on the same booth are left alone; several
        operators may run a booth at once up to its ``max_operators``.

        Raises:
            BoothNotFoundError: If the booth does not exist.
            AdmissionDeniedError: If the booth is at capacity.
        """

        def create(booth) -> BoothOperation:
            operation = BoothOperation(
                id=OperationId(uuid.uuid4()),
                booth_id=booth.id,
                operator_name=operator.name,
                operator_contact=operator.contact,
                operator_email=operator.email,
                operator_organization=operator.organization,
                notes=operator.notes,
                started_at=self._clock(),
            )
            return self._store.add_operation(operation)

        operation = self._admission.admit(booth_id, create)
        logger.info(
            "operation_started",
            operation_id=str(operation.id),
            booth_id=str(booth_id),
            operator=operation.operator_name,
        )
        return operation

    def end(self, operation_id: OperationId) -> OperationSummary:
        """Close an operation and fold it into the daily rollup.

        Ending an operation that is already closed returns its summary
        unchanged, so duplicate or concurrent end requests all succeed and
        only one of them performs the transition.

        Raises:
            OperationNotFoundError: If the operation does not exist.
        """
        with self._store.atomic():
            operation = self._store.lock_operation(operation_id)
            if operation is None:
                raise OperationNotFoundError(str(operation_id))

            if not operation.is_active:
                logger.info("operation_end_noop", operation_id=str(operation_id))
                return self._summary(operation)

            ended_at = self._clock()
            tally = self._participants.tally(operation.booth_id, operation.started_at, ended_at)
            closed = self._store.close_operation(operation_id, ended_at, tally.total)
            if closed is None:
                logger.info("operation_end_noop", operation_id=str(operation_id))
                return self._summary(self._store.get_operation(operation_id))

            self._stats.record_close(closed, tally)

        summary = self._summary(closed)
        logger.info(
            "operation_closed",
            operation_id=str(operation_id),
            booth_id=str(closed.booth_id),
            total_minutes=summary.duration.total_minutes,
            participants=summary.participants,
        )
        return summary

    def get(self, operation_id: OperationId) -> BoothOperation:
        operation = self._store.get_operation(operation_id)
        if operation is None:
            raise OperationNotFoundError(str(operation_id))
        return operation

    def participants_so_far(self, operation: BoothOperation) -> ParticipantTally:
        """Participants registered at the booth since the operation started.

        Broken down by gender and school level. A closed operation is counted
        up to its end.
        """
        end = operation.ended_at or self._clock()
        return self._participants.tally(operation.booth_id, operation.started_at, end)

    def active_operators(self, booth_id: BoothId) -> list[BoothOperation]:
        """Active operations on a booth, most recently started first."""
        return self._store.list_operations(OperationFilter(booth_id=booth_id, is_active=True))

    def history(self, criteria: OperationFilter) -> list[OperationHistoryEntry]:
        now = self._clock()
        names: dict[BoothId, str | None] = {}
        entries = []
        for op in self._store.list_operations(criteria):
            if op.booth_id not in names:
                booth = self._store.get_booth(op.booth_id)
                names[op.booth_id] = booth.name if booth else None
            entries.append(
                OperationHistoryEntry(
                    operation=op, duration=op.duration(now), booth_name=names[op.booth_id]
                )
            )
        return entries

    def stats(self, booth_id: BoothId | None = None) -> OperationStats:
        """Aggregate figures over all operations, or those of one booth."""
        operations = self._store.list_operations(OperationFilter(booth_id=booth_id))
        if not operations:
            return OperationStats()

        completed = [op for op in operations if op.ended_at is not None]
        average = 0
        if completed:
            total_minutes = sum(op.duration(op.ended_at).total_minutes for op in completed)
            average = round(total_minutes / len(completed))

        return OperationStats(
            total_operations=len(operations),
            active_operations=sum(1 for op in operations if op.is_active),
            total_operators=len({op.operator_contact or op.operator_name for op in operations}),
            average_duration_minutes=average,
            total_participants=sum(op.total_participants for op in operations),
        )

    def _summary(self, operation: BoothOperation) -> OperationSummary:
        return OperationSummary(
            operation=operation,
            duration=operation.duration(operation.ended_at or self._clock()),
            participants=operation.total_participants,
        )

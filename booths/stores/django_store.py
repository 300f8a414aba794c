"""Django ORM implementation of the stores.

Rows are converted to domain models on the way out; no ORM instance leaves
this module. Transient database failures surface as StorageUnavailableError
and are never retried here.
"""

import functools
from contextlib import contextmanager
from datetime import date, datetime

from django.db import IntegrityError, InterfaceError, OperationalError, transaction
from django.db.models import Count, F, Q

from booths import models
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
from booths.domain.errors import BoothNotFoundError, CodeConflictError, StorageUnavailableError
from booths.domain.models import DailyStatIncrement, OperationFilter
from booths.stores.interfaces import BoothStore, ParticipantCounter


def _translate_db_errors(func):
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except (OperationalError, InterfaceError) as exc:
            raise StorageUnavailableError(str(exc)) from exc

    return wrapper


def _to_booth(row: models.Booth) -> Booth:
    return Booth(
        id=BoothId(row.id),
        name=row.name,
        code=row.code,
        code_expires_at=row.code_expires_at,
        is_active=row.is_active,
        max_operators=row.max_operators,
    )


def _to_operation(row: models.BoothOperation) -> BoothOperation:
    return BoothOperation(
        id=OperationId(row.id),
        booth_id=BoothId(row.booth_id),
        operator_name=row.operator_name,
        operator_contact=row.operator_contact,
        started_at=row.started_at,
        ended_at=row.ended_at,
        is_active=row.is_active,
        total_participants=row.total_participants,
        operator_email=row.operator_email,
        operator_organization=row.operator_organization,
        notes=row.notes,
    )


def _to_session(row: models.OperatorSession) -> OperatorSession:
    return OperatorSession(
        token=row.token,
        operation_id=OperationId(row.operation_id),
        created_at=row.created_at,
        expires_at=row.expires_at,
        last_activity_at=row.last_activity_at,
        address=row.address,
    )


def _to_daily_stat(row: models.DailyStat) -> DailyStat:
    return DailyStat(
        booth_id=BoothId(row.booth_id),
        stat_date=row.stat_date,
        total_participants=row.total_participants,
        male_count=row.male_count,
        female_count=row.female_count,
        elementary_count=row.elementary_count,
        middle_count=row.middle_count,
        high_count=row.high_count,
        operator_count=row.operator_count,
        operation_hours=row.operation_hours,
    )


class DjangoBoothStore(BoothStore):
    """Relational store using the Django ORM.

    ``lock_*`` methods use SELECT ... FOR UPDATE and must run inside
    ``atomic()``. On PostgreSQL that serialises concurrent starts per booth
    and concurrent closes per operation.
    """

    @contextmanager
    def atomic(self):
        try:
            with transaction.atomic():
                yield
        except (OperationalError, InterfaceError) as exc:
            raise StorageUnavailableError(str(exc)) from exc

    # Booths

    @_translate_db_errors
    def get_booth(self, booth_id: BoothId) -> Booth | None:
        row = models.Booth.objects.filter(pk=booth_id.value).first()
        return _to_booth(row) if row else None

    @_translate_db_errors
    def lock_booth(self, booth_id: BoothId) -> Booth | None:
        row = models.Booth.objects.select_for_update().filter(pk=booth_id.value).first()
        return _to_booth(row) if row else None

    @_translate_db_errors
    def find_booth_by_code(self, code: str) -> Booth | None:
        row = models.Booth.objects.filter(code=code).first()
        return _to_booth(row) if row else None

    @_translate_db_errors
    def code_exists(self, code: str) -> bool:
        return models.Booth.objects.filter(code=code).exists()

    @_translate_db_errors
    def list_booths(self) -> list[Booth]:
        return [_to_booth(row) for row in models.Booth.objects.order_by("name")]

    @_translate_db_errors
    def set_booth_code(
        self, booth_id: BoothId, code: str | None, expires_at: datetime | None
    ) -> Booth:
        try:
            with transaction.atomic():
                updated = models.Booth.objects.filter(pk=booth_id.value).update(
                    code=code, code_expires_at=expires_at
                )
        except IntegrityError as exc:
            raise CodeConflictError(code or "") from exc
        if not updated:
            raise BoothNotFoundError(str(booth_id))
        return _to_booth(models.Booth.objects.get(pk=booth_id.value))

    # Code attempts

    @_translate_db_errors
    def add_attempt(self, attempt: CodeAttempt) -> None:
        models.CodeAttempt.objects.create(
            attempted_code=attempt.code,
            address=attempt.address,
            user_agent=attempt.user_agent,
            attempted_at=attempt.attempted_at,
            success=attempt.success,
            booth_id=attempt.booth_id.value if attempt.booth_id else None,
            failure_reason=attempt.reason.value if attempt.reason else None,
        )

    def _failed_since(self, address: str | None, since: datetime):
        return models.CodeAttempt.objects.filter(
            address=address, success=False, attempted_at__gt=since
        )

    @_translate_db_errors
    def count_failed_attempts(self, address: str | None, since: datetime) -> int:
        return self._failed_since(address, since).count()

    @_translate_db_errors
    def failed_attempt_times(self, address: str | None, since: datetime) -> list[datetime]:
        return list(
            self._failed_since(address, since)
            .order_by("attempted_at")
            .values_list("attempted_at", flat=True)
        )

    @_translate_db_errors
    def purge_attempts(self, before: datetime) -> int:
        deleted, _ = models.CodeAttempt.objects.filter(attempted_at__lt=before).delete()
        return deleted

    # Operations

    @_translate_db_errors
    def add_operation(self, operation: BoothOperation) -> BoothOperation:
        if not models.Booth.objects.filter(pk=operation.booth_id.value).exists():
            raise BoothNotFoundError(str(operation.booth_id))
        row = models.BoothOperation.objects.create(
            id=operation.id.value,
            booth_id=operation.booth_id.value,
            operator_name=operation.operator_name,
            operator_contact=operation.operator_contact,
            operator_email=operation.operator_email,
            operator_organization=operation.operator_organization,
            notes=operation.notes,
            started_at=operation.started_at,
            ended_at=operation.ended_at,
            is_active=operation.is_active,
            total_participants=operation.total_participants,
        )
        return _to_operation(row)

    @_translate_db_errors
    def get_operation(self, operation_id: OperationId) -> BoothOperation | None:
        row = models.BoothOperation.objects.filter(pk=operation_id.value).first()
        return _to_operation(row) if row else None

    @_translate_db_errors
    def lock_operation(self, operation_id: OperationId) -> BoothOperation | None:
        row = (
            models.BoothOperation.objects.select_for_update()
            .filter(pk=operation_id.value)
            .first()
        )
        return _to_operation(row) if row else None

    @_translate_db_errors
    def count_active_operations(self, booth_id: BoothId) -> int:
        return models.BoothOperation.objects.filter(
            booth_id=booth_id.value, is_active=True
        ).count()

    @_translate_db_errors
    def close_operation(
        self, operation_id: OperationId, ended_at: datetime, total_participants: int
    ) -> BoothOperation | None:
        with transaction.atomic():
            row = (
                models.BoothOperation.objects.select_for_update()
                .filter(pk=operation_id.value, is_active=True)
                .first()
            )
            if row is None:
                return None
            row.ended_at = ended_at
            row.is_active = False
            row.total_participants = total_participants
            row.save(update_fields=["ended_at", "is_active", "total_participants", "updated_at"])
        return _to_operation(row)

    @_translate_db_errors
    def list_operations(self, criteria: OperationFilter) -> list[BoothOperation]:
        queryset = models.BoothOperation.objects.all()
        if criteria.booth_id is not None:
            queryset = queryset.filter(booth_id=criteria.booth_id.value)
        if criteria.operator_name:
            queryset = queryset.filter(operator_name__icontains=criteria.operator_name)
        if criteria.started_from is not None:
            queryset = queryset.filter(started_at__gte=criteria.started_from)
        if criteria.started_to is not None:
            queryset = queryset.filter(started_at__lte=criteria.started_to)
        if criteria.is_active is not None:
            queryset = queryset.filter(is_active=criteria.is_active)
        return [_to_operation(row) for row in queryset.order_by("-started_at")]

    # Sessions

    @_translate_db_errors
    def add_session(self, session: OperatorSession) -> None:
        models.OperatorSession.objects.create(
            token=session.token,
            operation_id=session.operation_id.value,
            created_at=session.created_at,
            expires_at=session.expires_at,
            last_activity_at=session.last_activity_at,
            address=session.address,
        )

    @_translate_db_errors
    def get_session(self, token: str) -> OperatorSession | None:
        row = models.OperatorSession.objects.filter(token=token).first()
        return _to_session(row) if row else None

    @_translate_db_errors
    def save_session(self, session: OperatorSession) -> None:
        models.OperatorSession.objects.filter(token=session.token).update(
            expires_at=session.expires_at,
            last_activity_at=session.last_activity_at,
        )

    @_translate_db_errors
    def delete_session(self, token: str) -> bool:
        deleted, _ = models.OperatorSession.objects.filter(token=token).delete()
        return deleted > 0

    @_translate_db_errors
    def purge_sessions(self, before: datetime) -> int:
        deleted, _ = models.OperatorSession.objects.filter(expires_at__lt=before).delete()
        return deleted

    # Daily stats

    @_translate_db_errors
    def add_to_daily_stat(
        self, booth_id: BoothId, stat_date: date, increment: DailyStatIncrement
    ) -> DailyStat:
        tally = increment.participants
        with transaction.atomic():
            row, _ = models.DailyStat.objects.get_or_create(
                booth_id=booth_id.value, stat_date=stat_date
            )
            models.DailyStat.objects.filter(pk=row.pk).update(
                total_participants=F("total_participants") + tally.total,
                male_count=F("male_count") + tally.male,
                female_count=F("female_count") + tally.female,
                elementary_count=F("elementary_count") + tally.elementary,
                middle_count=F("middle_count") + tally.middle,
                high_count=F("high_count") + tally.high,
                operator_count=F("operator_count") + increment.operator_count,
                operation_hours=F("operation_hours") + increment.operation_hours,
            )
            row.refresh_from_db()
        return _to_daily_stat(row)

    @_translate_db_errors
    def get_daily_stat(self, booth_id: BoothId, stat_date: date) -> DailyStat | None:
        row = models.DailyStat.objects.filter(booth_id=booth_id.value, stat_date=stat_date).first()
        return _to_daily_stat(row) if row else None


class DjangoParticipantCounter(ParticipantCounter):
    """Counts rows of the participant registration table."""

    @_translate_db_errors
    def tally(self, booth_id: BoothId, start: datetime, end: datetime) -> ParticipantTally:
        counts = models.Participant.objects.filter(
            booth_id=booth_id.value, created_at__gte=start, created_at__lt=end
        ).aggregate(
            total=Count("id"),
            male=Count("id", filter=Q(gender="male")),
            female=Count("id", filter=Q(gender="female")),
            elementary=Count("id", filter=Q(school_level="elementary")),
            middle=Count("id", filter=Q(school_level="middle")),
            high=Count("id", filter=Q(school_level="high")),
        )
        return ParticipantTally(**counts)

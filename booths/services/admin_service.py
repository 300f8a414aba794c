"""Administrative operations over booth codes and operations."""

from collections.abc import Callable
from datetime import datetime, timedelta

from django.utils import timezone

from booths.conf import AccessPolicy, get_policy
from booths.domain import Booth, BoothId, BoothOperation
from booths.domain.errors import BoothNotFoundError, InvalidExpiryError, InvalidIdError
from booths.domain.models import (
    CodeAssignment,
    OperationFilter,
    OperationHistoryEntry,
    OperationStats,
    PurgeResult,
)
from booths.logging import get_logger
from booths.services.codes import CodeGenerator
from booths.services.operations import OperationLifecycle
from booths.stores.interfaces import BoothStore, ParticipantCounter

logger = get_logger(__name__)


def parse_booth_id(value: str) -> BoothId:
    """Parse a booth id, mapping malformed input to a domain error."""
    try:
        return BoothId.from_string(value)
    except (TypeError, ValueError, AttributeError) as exc:
        raise InvalidIdError("booth") from exc


class BoothAdminService:
    """Service behind the administrative API."""

    def __init__(
        self,
        store: BoothStore,
        generator: CodeGenerator,
        lifecycle: OperationLifecycle,
        policy: AccessPolicy,
        clock: Callable[[], datetime] = timezone.now,
    ) -> None:
        self._store = store
        self._generator = generator
        self._lifecycle = lifecycle
        self._policy = policy
        self._clock = clock

    @classmethod
    def build(
        cls,
        store: BoothStore,
        participants: ParticipantCounter,
        policy: AccessPolicy | None = None,
        clock: Callable[[], datetime] = timezone.now,
    ) -> "BoothAdminService":
        policy = policy or get_policy()
        return cls(
            store=store,
            generator=CodeGenerator(store, max_attempts=policy.code_max_attempts),
            lifecycle=OperationLifecycle(store, participants, clock=clock),
            policy=policy,
            clock=clock,
        )

    def assign_code(self, booth_id: str, expiry_days: int | None = None) -> CodeAssignment:
        """Generate a fresh code and write it onto the booth.

        Raises:
            InvalidIdError: If the booth_id is not a valid UUID.
            InvalidExpiryError: If expiry_days is below one.
            BoothNotFoundError: If the booth does not exist.
            CodeConflictError: If another booth took the code in the meantime.
        """
        return self._write_code(booth_id, expiry_days, "code_assigned")

    def regenerate_code(self, booth_id: str, expiry_days: int | None = None) -> CodeAssignment:
        """Replace the booth's current code with a new one.

        The old code stops resolving in the same write that installs the new
        one. If anything fails the booth keeps its old code.

        Raises the same errors as assign_code().
        """
        return self._write_code(booth_id, expiry_days, "code_regenerated")

    def _write_code(self, booth_id: str, expiry_days: int | None, event: str) -> CodeAssignment:
        days = expiry_days if expiry_days is not None else self._policy.default_code_expiry_days
        if days < 1:
            raise InvalidExpiryError()
        booth = parse_booth_id(booth_id)
        if self._store.get_booth(booth) is None:
            raise BoothNotFoundError(booth_id)

        # the generator never returns a code any booth holds, so it differs from the old one
        code = self._generator.generate_unique()
        expires_at = self._clock() + timedelta(days=days)
        self._store.set_booth_code(booth, code, expires_at)
        logger.info(event, booth_id=booth_id, expires_at=expires_at.isoformat())
        return CodeAssignment(booth_id=booth, code=code, expires_at=expires_at)

    def list_booth_codes(self) -> list[Booth]:
        return self._store.list_booths()

    def list_active_operators(self, booth_id: str) -> list[BoothOperation]:
        booth = parse_booth_id(booth_id)
        if self._store.get_booth(booth) is None:
            raise BoothNotFoundError(booth_id)
        return self._lifecycle.active_operators(booth)

    def get_operation_stats(self, booth_id: str | None = None) -> OperationStats:
        return self._lifecycle.stats(parse_booth_id(booth_id) if booth_id else None)

    def operation_history(self, criteria: OperationFilter) -> list[OperationHistoryEntry]:
        return self._lifecycle.history(criteria)

    def purge_expired(self) -> PurgeResult:
        """Delete expired sessions and code attempts past retention."""
        now = self._clock()
        result = PurgeResult(
            sessions=self._store.purge_sessions(now),
            attempts=self._store.purge_attempts(now - self._policy.attempt_retention),
        )
        logger.info("purge_completed", sessions=result.sessions, attempts=result.attempts)
        return result

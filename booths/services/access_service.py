"""Operator-facing booth access service.

Services:
- Depend only on interfaces (stores)
- Validate domain invariants
- Perform orchestration and error mapping
- Return domain models or domain errors

These operations are the only entry points handlers should call for
operators.
"""

from collections.abc import Callable
from datetime import datetime

from django.utils import timezone

from booths.conf import AccessPolicy, get_policy
from booths.domain import OperatorInfo
from booths.domain.errors import SessionExpiredError, SessionInvalidError, SessionNotFoundError
from booths.domain.models import OperationSummary, SessionStart, SessionView
from booths.domain.value_objects import MAX_ADDRESS_LENGTH
from booths.services.codes import base36
from booths.services.operations import OperationLifecycle
from booths.services.rate_limiter import RateLimiter
from booths.services.sessions import SessionManager
from booths.services.validator import CodeValidator
from booths.stores.interfaces import BoothStore, ParticipantCounter

QUICK_START_PREFIX = "Operator_"


class BoothAccessService:
    """Service for operator sign-in, session upkeep and sign-out."""

    def __init__(
        self,
        store: BoothStore,
        validator: CodeValidator,
        lifecycle: OperationLifecycle,
        sessions: SessionManager,
        clock: Callable[[], datetime] = timezone.now,
    ) -> None:
        self._store = store
        self._validator = validator
        self._lifecycle = lifecycle
        self._sessions = sessions
        self._clock = clock

    @classmethod
    def build(
        cls,
        store: BoothStore,
        participants: ParticipantCounter,
        policy: AccessPolicy | None = None,
        clock: Callable[[], datetime] = timezone.now,
    ) -> "BoothAccessService":
        """Wire the components together from a policy (settings by default)."""
        policy = policy or get_policy()
        limiter = RateLimiter(
            store,
            max_failures=policy.max_failed_attempts,
            window=policy.rate_limit_window,
            clock=clock,
        )
        return cls(
            store=store,
            validator=CodeValidator(store, limiter, clock=clock),
            lifecycle=OperationLifecycle(store, participants, clock=clock),
            sessions=SessionManager(store, ttl=policy.session_ttl, clock=clock),
            clock=clock,
        )

    def start_session(
        self,
        code: str,
        operator: OperatorInfo,
        address: str | None,
        user_agent: str | None = None,
    ) -> SessionStart:
        """Validate a booth code, start an operation and issue its token.

        Raises:
            RateLimitedError: If the address has too many failed attempts.
            CodeNotFoundError: If no booth holds the code.
            CodeExpiredError: If the code is past its expiry.
            BoothInactiveError: If the booth is deactivated.
            AdmissionDeniedError: If the booth is at capacity.
        """
        address = address[:MAX_ADDRESS_LENGTH] if address else None
        result = self._validator.require_valid(code, address, user_agent)
        with self._store.atomic():
            operation = self._lifecycle.start(result.booth_id, operator)
            session = self._sessions.issue(operation.id, address)
        return SessionStart(
            token=session.token,
            expires_at=session.expires_at,
            booth_name=result.booth_name,
            operation=operation,
        )

    def quick_start_session(
        self, code: str, address: str | None, user_agent: str | None = None
    ) -> SessionStart:
        """Sign in with only a booth code.

        The operator gets a generated temporary name and no contact. Raises
        the same errors as start_session().
        """
        stamp = base36(int(self._clock().timestamp() * 1000)).upper()
        operator = OperatorInfo(name=f"{QUICK_START_PREFIX}{stamp}")
        return self.start_session(code, operator, address, user_agent)

    def end_session(self, token: str) -> OperationSummary:
        """End the operation behind a token and revoke the token.

        A token whose operation was already closed still ends cleanly. The
        token itself is revoked on success, so repeating the call with the
        same token raises SessionNotFoundError. Callers that retry a sign-out
        should treat that error as already signed out.

        Raises:
            SessionNotFoundError: If no session matches the token.
            SessionExpiredError: If the session is past its expiry.
        """
        context = self._sessions.resolve(token, require_active=False)
        summary = self._lifecycle.end(context.operation.id)
        self._sessions.revoke(token)
        return summary

    def refresh_session(self, token: str) -> bool:
        """Extend a session. False if the token no longer grants access."""
        try:
            self._sessions.refresh(token)
        except (SessionNotFoundError, SessionExpiredError, SessionInvalidError):
            return False
        return True

    def get_current_session(self, token: str) -> SessionView:
        """Describe the operation a token is signed in to.

        Raises:
            SessionNotFoundError: If no session matches the token.
            SessionExpiredError: If the session is past its expiry.
            SessionInvalidError: If the operation has already closed.
        """
        context = self._sessions.resolve(token)
        operation = context.operation
        return SessionView(
            booth_id=context.booth.id,
            booth_name=context.booth.name,
            operation=operation,
            expires_at=context.session.expires_at,
            last_activity_at=context.session.last_activity_at,
            duration=operation.duration(self._clock()),
            participants=self._lifecycle.participants_so_far(operation),
        )

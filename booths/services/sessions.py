"""Operator session tokens.

The session manager only manages a token's existence and validity. Ending
the bound operation is the caller's job (see OperationLifecycle.end).
"""

import secrets
import string
from collections.abc import Callable
from dataclasses import replace
from datetime import datetime, timedelta

from django.utils import timezone

from booths.domain import OperationId, OperatorSession
from booths.domain.errors import (
    SessionExpiredError,
    SessionInvalidError,
    SessionNotFoundError,
)
from booths.domain.models import SessionContext
from booths.logging import get_logger, mask_token
from booths.stores.interfaces import BoothStore

logger = get_logger(__name__)

TOKEN_ALPHABET = string.ascii_letters + string.digits
TOKEN_LENGTH = 64


def generate_token() -> str:
    return "".join(secrets.choice(TOKEN_ALPHABET) for _ in range(TOKEN_LENGTH))


class SessionManager:
    """Issues, resolves, refreshes and revokes operator sessions.

    Expiry is checked on read. There is no timer here; the purge_expired
    command removes rows nobody came back for.
    """

    def __init__(
        self,
        store: BoothStore,
        ttl: timedelta = timedelta(hours=24),
        clock: Callable[[], datetime] = timezone.now,
    ) -> None:
        self._store = store
        self._ttl = ttl
        self._clock = clock

    def issue(self, operation_id: OperationId, address: str | None = None) -> OperatorSession:
        now = self._clock()
        session = OperatorSession(
            token=generate_token(),
            operation_id=operation_id,
            created_at=now,
            expires_at=now + self._ttl,
            last_activity_at=now,
            address=address,
        )
        self._store.add_session(session)
        logger.info(
            "session_issued",
            operation_id=str(operation_id),
            token=mask_token(session.token),
            expires_at=session.expires_at.isoformat(),
        )
        return session

    def resolve(self, token: str, require_active: bool = True) -> SessionContext:
        """Look up a session and touch its last activity.

        Raises:
            SessionNotFoundError: If no session matches the token.
            SessionExpiredError: If the session is past its expiry. The row is deleted.
            SessionInvalidError: If the bound operation has closed and
                ``require_active`` is set.
        """
        now = self._clock()
        session = self._store.get_session(token) if token else None
        if session is None:
            raise SessionNotFoundError()

        if session.is_expired(now):
            self._store.delete_session(token)
            logger.info("session_expired", token=mask_token(token))
            raise SessionExpiredError()

        operation = self._store.get_operation(session.operation_id)
        if operation is None:
            raise SessionNotFoundError()
        if require_active and not operation.is_active:
            raise SessionInvalidError()

        booth = self._store.get_booth(operation.booth_id)
        if booth is None:
            raise SessionNotFoundError()

        session = replace(session, last_activity_at=now)
        self._store.save_session(session)
        return SessionContext(session=session, operation=operation, booth=booth)

    def refresh(self, token: str) -> OperatorSession:
        """Push the expiry out to a full TTL from now. Never shortens it.

        Raises the same errors as resolve().
        """
        context = self.resolve(token)
        session = context.session
        extended = replace(
            session,
            expires_at=max(session.expires_at, self._clock() + self._ttl),
        )
        self._store.save_session(extended)
        return extended

    def revoke(self, token: str) -> bool:
        removed = self._store.delete_session(token)
        if removed:
            logger.info("session_revoked", token=mask_token(token))
        return removed

"""Unit tests for SessionManager.

Run with: pytest tests/test_sessions.py -v
"""

import string
from datetime import timedelta

import pytest

from booths.domain import OperatorInfo
from booths.domain.errors import SessionExpiredError, SessionInvalidError, SessionNotFoundError
from booths.services.operations import OperationLifecycle
from booths.services.sessions import TOKEN_LENGTH, SessionManager


@pytest.fixture
def lifecycle(store, participants, clock) -> OperationLifecycle:
    return OperationLifecycle(store, participants, clock=clock)


@pytest.fixture
def sessions(store, clock) -> SessionManager:
    return SessionManager(store, ttl=timedelta(hours=1), clock=clock)


@pytest.fixture
def operation(lifecycle, make_booth):
    booth = make_booth()
    return lifecycle.start(booth.id, OperatorInfo(name="Kim"))


class TestIssue:
    """Tests for SessionManager.issue."""

    def test_token_shape(self, sessions, operation):
        session = sessions.issue(operation.id)
        assert len(session.token) == TOKEN_LENGTH
        assert set(session.token) <= set(string.ascii_letters + string.digits)

    def test_expiry_is_ttl_from_now(self, sessions, operation, clock):
        session = sessions.issue(operation.id, address="203.0.113.7")
        assert session.created_at == clock()
        assert session.expires_at == clock() + timedelta(hours=1)
        assert session.address == "203.0.113.7"

    def test_tokens_are_unique(self, sessions, operation):
        tokens = {sessions.issue(operation.id).token for _ in range(50)}
        assert len(tokens) == 50


class TestResolve:
    """Tests for SessionManager.resolve."""

    def test_returns_context_and_touches_activity(self, sessions, operation, clock):
        session = sessions.issue(operation.id)
        clock.advance(minutes=10)

        context = sessions.resolve(session.token)

        assert context.operation.id == operation.id
        assert context.booth.id == operation.booth_id
        assert context.session.last_activity_at == clock()

    def test_unknown_token(self, sessions):
        with pytest.raises(SessionNotFoundError):
            sessions.resolve("nope")

    def test_empty_token(self, sessions):
        with pytest.raises(SessionNotFoundError):
            sessions.resolve("")

    def test_valid_at_exact_expiry(self, sessions, operation, clock):
        session = sessions.issue(operation.id)
        clock.set(session.expires_at)
        assert sessions.resolve(session.token).session.token == session.token

    def test_expired_session_is_deleted(self, store, sessions, operation, clock):
        """An expired session fails and is removed on the same read."""
        session = sessions.issue(operation.id)
        clock.advance(hours=1, seconds=1)

        with pytest.raises(SessionExpiredError):
            sessions.resolve(session.token)

        assert store.get_session(session.token) is None
        with pytest.raises(SessionNotFoundError):
            sessions.resolve(session.token)

    def test_closed_operation_invalidates(self, sessions, lifecycle, operation):
        session = sessions.issue(operation.id)
        lifecycle.end(operation.id)

        with pytest.raises(SessionInvalidError):
            sessions.resolve(session.token)

    def test_closed_operation_allowed_when_not_required(self, sessions, lifecycle, operation):
        session = sessions.issue(operation.id)
        lifecycle.end(operation.id)

        context = sessions.resolve(session.token, require_active=False)

        assert not context.operation.is_active


class TestRefresh:
    """Tests for SessionManager.refresh."""

    def test_extends_past_original_expiry(self, sessions, operation, clock):
        """After a refresh the session still works past its original expiry."""
        session = sessions.issue(operation.id)
        clock.advance(minutes=50)

        refreshed = sessions.refresh(session.token)

        assert refreshed.expires_at == clock() + timedelta(hours=1)
        clock.set(session.expires_at + timedelta(minutes=1))
        assert sessions.resolve(session.token).session.token == session.token

    def test_expired_cannot_refresh(self, sessions, operation, clock):
        session = sessions.issue(operation.id)
        clock.advance(hours=2)
        with pytest.raises(SessionExpiredError):
            sessions.refresh(session.token)


class TestRevoke:
    """Tests for SessionManager.revoke."""

    def test_revoke_removes_token_only(self, store, sessions, operation):
        """Revoking a session leaves the operation running."""
        session = sessions.issue(operation.id)

        assert sessions.revoke(session.token)

        assert store.get_session(session.token) is None
        assert store.get_operation(operation.id).is_active

    def test_revoke_unknown_token(self, sessions):
        assert not sessions.revoke("missing")

"""Unit tests for BoothAccessService.

These run against the in-memory store.
Run with: pytest tests/test_access_service.py -v
"""

import re
from datetime import timedelta

import pytest

from booths.conf import ONE_SHIFT_HOURS, AccessPolicy
from booths.domain import OperatorInfo
from booths.domain.errors import (
    AdmissionDeniedError,
    CodeNotFoundError,
    RateLimitedError,
    SessionExpiredError,
    SessionInvalidError,
    SessionNotFoundError,
)
from booths.services.access_service import BoothAccessService

ADDRESS = "203.0.113.7"


@pytest.fixture
def service(store, participants, clock) -> BoothAccessService:
    return BoothAccessService.build(store, participants, policy=AccessPolicy(), clock=clock)


class TestStartSession:
    """Tests for BoothAccessService.start_session."""

    def test_returns_token_and_booth(self, service, store, make_booth, clock):
        make_booth(name="Robotics", code="ABC123")

        started = service.start_session("ABC123", OperatorInfo(name="Kim"), ADDRESS)

        assert started.booth_name == "Robotics"
        assert started.expires_at == clock() + timedelta(hours=24)
        assert started.operation.is_active
        session = store.get_session(started.token)
        assert session.operation_id == started.operation.id
        assert session.address == ADDRESS

    def test_bad_code_creates_nothing(self, service, store, make_booth):
        booth = make_booth(code="ABC123")

        with pytest.raises(CodeNotFoundError):
            service.start_session("XYZ999", OperatorInfo(name="Kim"), ADDRESS)

        assert store.count_active_operations(booth.id) == 0

    def test_rate_limited_after_five_failures(self, service, make_booth):
        make_booth(code="ABC123")
        for _ in range(5):
            with pytest.raises(CodeNotFoundError):
                service.start_session("WRONG1", OperatorInfo(name="Kim"), ADDRESS)

        with pytest.raises(RateLimitedError):
            service.start_session("ABC123", OperatorInfo(name="Kim"), ADDRESS)

    def test_one_shift_policy(self, store, participants, make_booth, clock):
        make_booth(code="ABC123")
        service = BoothAccessService.build(
            store,
            participants,
            policy=AccessPolicy(session_ttl=timedelta(hours=ONE_SHIFT_HOURS)),
            clock=clock,
        )

        started = service.start_session("ABC123", OperatorInfo(name="Kim"), ADDRESS)

        assert started.expires_at == clock() + timedelta(hours=8)

    def test_single_operator_booth_handover(self, service, make_booth):
        """B is refused while A runs the booth and admitted once A signs out."""
        make_booth(name="B1", code="ONE111", max_operators=1)
        first = service.start_session("ONE111", OperatorInfo(name="A"), "198.51.100.1")

        with pytest.raises(AdmissionDeniedError):
            service.start_session("ONE111", OperatorInfo(name="B"), "198.51.100.2")

        service.end_session(first.token)
        second = service.start_session("ONE111", OperatorInfo(name="B"), "198.51.100.2")

        assert second.operation.operator_name == "B"


class TestQuickStartSession:
    """Tests for BoothAccessService.quick_start_session."""

    def test_signs_in_with_temporary_name(self, service, store, make_booth):
        make_booth(name="Robotics", code="ABC123")

        started = service.quick_start_session("ABC123", ADDRESS)

        assert started.booth_name == "Robotics"
        assert re.match(r"^Operator_[0-9A-Z]+$", started.operation.operator_name)
        assert started.operation.operator_contact is None
        assert store.get_session(started.token).address == ADDRESS

    def test_names_differ_over_time(self, service, make_booth, clock):
        make_booth(code="ABC123", max_operators=2)

        first = service.quick_start_session("ABC123", ADDRESS)
        clock.advance(seconds=1)
        second = service.quick_start_session("ABC123", ADDRESS)

        assert first.operation.operator_name != second.operation.operator_name

    def test_bad_code(self, service, make_booth):
        make_booth(code="ABC123")

        with pytest.raises(CodeNotFoundError):
            service.quick_start_session("XYZ999", ADDRESS)

class TestEndSession:
    """Tests for BoothAccessService.end_session."""

    def test_closes_operation_and_revokes(self, service, store, make_booth, clock):
        make_booth(code="ABC123")
        started = service.start_session("ABC123", OperatorInfo(name="Kim"), ADDRESS)
        clock.advance(minutes=45)

        summary = service.end_session(started.token)

        assert summary.duration.total_minutes == 45
        assert not store.get_operation(started.operation.id).is_active
        assert store.get_session(started.token) is None

    def test_second_sign_out_has_no_session(self, service, make_booth):
        make_booth(code="ABC123")
        started = service.start_session("ABC123", OperatorInfo(name="Kim"), ADDRESS)
        service.end_session(started.token)

        with pytest.raises(SessionNotFoundError):
            service.end_session(started.token)

    def test_operation_already_closed_still_signs_out(self, service, store, make_booth):
        """A token whose operation closed elsewhere ends cleanly."""
        make_booth(code="ABC123")
        started = service.start_session("ABC123", OperatorInfo(name="Kim"), ADDRESS)
        service._lifecycle.end(started.operation.id)

        summary = service.end_session(started.token)

        assert summary.operation.id == started.operation.id
        assert store.get_session(started.token) is None

    def test_expired_session(self, service, make_booth, clock):
        make_booth(code="ABC123")
        started = service.start_session("ABC123", OperatorInfo(name="Kim"), ADDRESS)
        clock.advance(hours=25)

        with pytest.raises(SessionExpiredError):
            service.end_session(started.token)


class TestRefreshSession:
    """Tests for BoothAccessService.refresh_session."""

    def test_valid_token(self, service, store, make_booth, clock):
        make_booth(code="ABC123")
        started = service.start_session("ABC123", OperatorInfo(name="Kim"), ADDRESS)
        clock.advance(hours=20)

        assert service.refresh_session(started.token)
        assert store.get_session(started.token).expires_at == clock() + timedelta(hours=24)

    def test_unknown_token(self, service):
        assert not service.refresh_session("missing")

    def test_expired_token(self, service, make_booth, clock):
        make_booth(code="ABC123")
        started = service.start_session("ABC123", OperatorInfo(name="Kim"), ADDRESS)
        clock.advance(hours=25)

        assert not service.refresh_session(started.token)


class TestGetCurrentSession:
    """Tests for BoothAccessService.get_current_session."""

    def test_reports_progress(self, service, participants, make_booth, clock):
        booth = make_booth(name="Robotics", code="ABC123")
        started = service.start_session("ABC123", OperatorInfo(name="Kim"), ADDRESS)
        participants.register(booth.id, clock())
        clock.advance(minutes=75)
        participants.register(booth.id, clock() - timedelta(minutes=1))

        view = service.get_current_session(started.token)

        assert view.booth_id == booth.id
        assert view.booth_name == "Robotics"
        assert view.duration.hours == 1
        assert view.duration.minutes == 15
        assert view.participants.total == 2
        assert view.last_activity_at == clock()

    def test_participant_breakdown(self, service, participants, make_booth, clock):
        """The current session reports participants by gender and school level."""
        booth = make_booth(code="ABC123")
        started = service.start_session("ABC123", OperatorInfo(name="Kim"), ADDRESS)
        participants.register(booth.id, clock(), gender="male", school_level="elementary")
        participants.register(booth.id, clock(), gender="female", school_level="high")
        participants.register(booth.id, clock(), gender="female", school_level="high")
        clock.advance(minutes=5)

        tally = service.get_current_session(started.token).participants

        assert tally.total == 3
        assert (tally.male, tally.female) == (1, 2)
        assert (tally.elementary, tally.middle, tally.high) == (1, 0, 2)

    def test_closed_operation(self, service, make_booth):
        make_booth(code="ABC123")
        started = service.start_session("ABC123", OperatorInfo(name="Kim"), ADDRESS)
        service._lifecycle.end(started.operation.id)

        with pytest.raises(SessionInvalidError):
            service.get_current_session(started.token)

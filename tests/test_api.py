"""Integration tests for the operator and admin HTTP API.

Run with: pytest tests/test_api.py -v
"""

import uuid
from datetime import timedelta

import pytest
from django.utils import timezone
from rest_framework.test import APIClient

from booths import models

START_URL = "/api/operator/sessions"
QUICK_START_URL = "/api/operator/sessions/quick"
SESSION_URL = "/api/operator/session"
REFRESH_URL = "/api/operator/session/refresh"


@pytest.fixture
def booth_row():
    return models.Booth.objects.create(
        name="Robotics",
        code="ABC123",
        code_expires_at=timezone.now() + timedelta(days=30),
        max_operators=1,
    )


@pytest.fixture
def admin_client(admin_user) -> APIClient:
    client = APIClient()
    client.force_authenticate(user=admin_user)
    return client


def sign_in(client: APIClient, code: str = "ABC123", name: str = "Kim"):
    return client.post(
        START_URL,
        {"code": code, "operator": {"name": name, "contact": "010-1234-5678"}},
        format="json",
    )


def bearer(token: str) -> dict:
    return {"HTTP_AUTHORIZATION": f"Bearer {token}"}


@pytest.mark.django_db
class TestStartSession:
    """Tests for POST /api/operator/sessions"""

    def test_valid_code_returns_token(self, api_client: APIClient, booth_row):
        """Given a valid code, returns 201 with a token and the booth name."""
        response = sign_in(api_client)

        assert response.status_code == 201
        body = response.json()
        assert len(body["token"]) == 64
        assert body["booth_name"] == "Robotics"
        assert body["operation"]["operator_contact"] == "01012345678"
        assert body["operation"]["is_active"] is True

    def test_unknown_code(self, api_client: APIClient, booth_row):
        """Given an unknown code, returns 404 with the error code."""
        response = sign_in(api_client, code="XYZ999")

        assert response.status_code == 404
        assert response.json() == {
            "error": {"code": "CODE_NOT_FOUND", "message": "Invalid booth code"}
        }

    def test_blank_operator_name(self, api_client: APIClient, booth_row):
        response = api_client.post(
            START_URL, {"code": "ABC123", "operator": {"name": "  "}}, format="json"
        )

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_OPERATOR_INFO"

    def test_overlong_contact(self, api_client: APIClient, booth_row):
        """A contact with more digits than the column holds is a 400, not a storage error."""
        response = api_client.post(
            START_URL,
            {"code": "ABC123", "operator": {"name": "Kim", "contact": "0" * 25}},
            format="json",
        )

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_OPERATOR_INFO"
        assert not models.BoothOperation.objects.exists()

    def test_free_form_source_address(self, api_client: APIClient, booth_row):
        """A source address that is not an IP literal is stored as given."""
        response = api_client.post(
            START_URL,
            {"code": "ABC123", "operator": {"name": "Kim"}},
            format="json",
            REMOTE_ADDR="kiosk-3",
        )

        assert response.status_code == 201
        assert models.CodeAttempt.objects.get().address == "kiosk-3"
        assert models.OperatorSession.objects.get().address == "kiosk-3"

    def test_missing_code_field(self, api_client: APIClient):
        response = api_client.post(START_URL, {"operator": {"name": "Kim"}}, format="json")
        assert response.status_code == 400

    def test_expired_code(self, api_client: APIClient, booth_row):
        booth_row.code_expires_at = timezone.now() - timedelta(minutes=1)
        booth_row.save()

        assert sign_in(api_client).status_code == 410

    def test_inactive_booth(self, api_client: APIClient, booth_row):
        booth_row.is_active = False
        booth_row.save()

        assert sign_in(api_client).status_code == 403

    def test_admission_denied(self, api_client: APIClient, booth_row):
        """A second operator on a one-operator booth gets 409 with the limit."""
        assert sign_in(api_client, name="A").status_code == 201

        response = sign_in(api_client, name="B")

        assert response.status_code == 409
        assert response.json()["error"]["code"] == "ADMISSION_DENIED"
        assert response.json()["error"]["limit"] == 1

    def test_rate_limited(self, api_client: APIClient, booth_row):
        """The sixth attempt after five failures gets 429 and Retry-After."""
        for _ in range(5):
            assert sign_in(api_client, code="WRONG1").status_code == 404

        response = sign_in(api_client)

        assert response.status_code == 429
        assert int(response["Retry-After"]) > 0
        assert response.json()["error"]["retry_after"] == int(response["Retry-After"])
        assert models.CodeAttempt.objects.count() == 6


@pytest.mark.django_db
class TestCurrentSession:
    """Tests for GET/DELETE /api/operator/session and POST refresh"""

    def test_get_current_session(self, api_client: APIClient, booth_row):
        token = sign_in(api_client).json()["token"]

        response = api_client.get(SESSION_URL, **bearer(token))

        assert response.status_code == 200
        body = response.json()
        assert body["booth_name"] == "Robotics"
        assert body["booth_id"] == str(booth_row.id)
        assert body["participants"] == {
            "total": 0,
            "male": 0,
            "female": 0,
            "elementary": 0,
            "middle": 0,
            "high": 0,
        }
        assert body["duration"]["total_minutes"] == 0

    def test_missing_token(self, api_client: APIClient):
        response = api_client.get(SESSION_URL)

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "SESSION_NOT_FOUND"

    def test_unknown_token(self, api_client: APIClient):
        assert api_client.get(SESSION_URL, **bearer("nope")).status_code == 401

    def test_expired_token(self, api_client: APIClient, booth_row):
        token = sign_in(api_client).json()["token"]
        models.OperatorSession.objects.filter(token=token).update(
            expires_at=timezone.now() - timedelta(seconds=1)
        )

        response = api_client.get(SESSION_URL, **bearer(token))

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "SESSION_EXPIRED"
        assert not models.OperatorSession.objects.filter(token=token).exists()

    def test_sign_out(self, api_client: APIClient, booth_row):
        """Signing out closes the operation and the token stops working."""
        token = sign_in(api_client).json()["token"]

        response = api_client.delete(SESSION_URL, **bearer(token))

        assert response.status_code == 200
        assert response.json()["operation"]["is_active"] is False
        assert api_client.get(SESSION_URL, **bearer(token)).status_code == 401
        assert sign_in(api_client, name="B").status_code == 201

    def test_repeated_sign_out(self, api_client: APIClient, booth_row):
        """The token is gone after the first sign-out, so a retry gets 401."""
        token = sign_in(api_client).json()["token"]
        assert api_client.delete(SESSION_URL, **bearer(token)).status_code == 200

        response = api_client.delete(SESSION_URL, **bearer(token))

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "SESSION_NOT_FOUND"

    def test_refresh(self, api_client: APIClient, booth_row):
        token = sign_in(api_client).json()["token"]

        assert api_client.post(REFRESH_URL, **bearer(token)).json() == {"refreshed": True}
        assert api_client.post(REFRESH_URL, **bearer("nope")).json() == {"refreshed": False}


@pytest.mark.django_db
class TestQuickStartSession:
    """Tests for POST /api/operator/sessions/quick"""

    def test_code_only_sign_in(self, api_client: APIClient, booth_row):
        response = api_client.post(QUICK_START_URL, {"code": "ABC123"}, format="json")

        assert response.status_code == 201
        operation = response.json()["operation"]
        assert operation["operator_name"].startswith("Operator_")
        assert operation["operator_contact"] is None

    def test_unknown_code(self, api_client: APIClient, booth_row):
        response = api_client.post(QUICK_START_URL, {"code": "XYZ999"}, format="json")

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "CODE_NOT_FOUND"

    def test_missing_code(self, api_client: APIClient):
        assert api_client.post(QUICK_START_URL, {}, format="json").status_code == 400


@pytest.mark.django_db
class TestAdminAccess:
    """Admin endpoints require a staff user."""

    def test_anonymous_is_refused(self, api_client: APIClient, booth_row):
        response = api_client.get("/api/admin/booths/codes")
        assert response.status_code in (401, 403)

    def test_operator_token_is_not_admin(self, api_client: APIClient, booth_row):
        token = sign_in(api_client).json()["token"]
        response = api_client.get("/api/admin/stats", **bearer(token))
        assert response.status_code in (401, 403)


@pytest.mark.django_db
class TestAdminCodes:
    """Tests for the admin code endpoints"""

    def test_list_codes(self, admin_client: APIClient, booth_row):
        response = admin_client.get("/api/admin/booths/codes")

        assert response.status_code == 200
        assert response.json()[0]["code"] == "ABC123"

    def test_assign_code(self, admin_client: APIClient):
        booth = models.Booth.objects.create(name="Chemistry")

        response = admin_client.post(
            f"/api/admin/booths/{booth.id}/code", {"expiry_days": 7}, format="json"
        )

        assert response.status_code == 201
        booth.refresh_from_db()
        assert booth.code == response.json()["code"]
        assert booth.code_expires_at > timezone.now() + timedelta(days=6)

    def test_regenerate_code(self, admin_client: APIClient, booth_row):
        response = admin_client.post(f"/api/admin/booths/{booth_row.id}/code/regenerate")

        assert response.status_code == 201
        booth_row.refresh_from_db()
        assert booth_row.code == response.json()["code"]

    def test_assign_invalid_id(self, admin_client: APIClient):
        response = admin_client.post("/api/admin/booths/not-a-uuid/code")

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_ID"

    def test_assign_unknown_booth(self, admin_client: APIClient):
        response = admin_client.post(f"/api/admin/booths/{uuid.uuid4()}/code")
        assert response.status_code == 404

    def test_assign_zero_expiry(self, admin_client: APIClient, booth_row):
        response = admin_client.post(
            f"/api/admin/booths/{booth_row.id}/code", {"expiry_days": 0}, format="json"
        )
        assert response.status_code == 400


@pytest.mark.django_db
class TestAdminOperations:
    """Tests for active operators, stats and history"""

    def test_active_operators(self, api_client: APIClient, admin_client: APIClient, booth_row):
        sign_in(api_client)

        response = admin_client.get(f"/api/admin/booths/{booth_row.id}/operators")

        assert response.status_code == 200
        assert [op["operator_name"] for op in response.json()] == ["Kim"]

    def test_history_filter(self, api_client: APIClient, admin_client: APIClient, booth_row):
        token = sign_in(api_client).json()["token"]
        api_client.delete(SESSION_URL, **bearer(token))
        sign_in(api_client, name="Lee")

        response = admin_client.get("/api/admin/operations", {"is_active": "false"})

        assert response.status_code == 200
        [entry] = response.json()
        assert entry["operation"]["operator_name"] == "Kim"
        assert entry["booth_name"] == "Robotics"

    def test_stats(self, api_client: APIClient, admin_client: APIClient, booth_row):
        sign_in(api_client)

        response = admin_client.get("/api/admin/stats", {"booth_id": str(booth_row.id)})

        assert response.status_code == 200
        assert response.json()["total_operations"] == 1
        assert response.json()["active_operations"] == 1

"""Tests for cache behavior.

Run with: pytest tests/test_cache.py -v
"""

import pytest
from django.core.cache import cache
from django.utils import timezone
from rest_framework.test import APIClient

from booths import models
from booths.cache import STATS_ALL_KEY, stats_cache_key


@pytest.fixture
def admin_client(admin_user) -> APIClient:
    client = APIClient()
    client.force_authenticate(user=admin_user)
    return client


@pytest.fixture
def booth_row():
    return models.Booth.objects.create(name="Robotics", code="ABC123")


@pytest.mark.django_db
class TestCacheInvalidation:
    """Tests for cache invalidation on model changes."""

    def test_stats_response_is_cached(self, admin_client: APIClient, booth_row):
        """Fetching stats stores the response under the stats key."""
        admin_client.get("/api/admin/stats")
        assert cache.get(STATS_ALL_KEY)["total_operations"] == 0

    def test_cached_stats_are_served(self, admin_client: APIClient, booth_row):
        cache.set(STATS_ALL_KEY, {"total_operations": 99})
        assert admin_client.get("/api/admin/stats").json() == {"total_operations": 99}

    def test_operation_save_invalidates_stats(self, admin_client: APIClient, booth_row):
        """Saving an operation drops both the global and per-booth stats keys."""
        admin_client.get("/api/admin/stats")
        admin_client.get("/api/admin/stats", {"booth_id": str(booth_row.id)})

        models.BoothOperation.objects.create(
            booth=booth_row, operator_name="Kim", started_at=timezone.now()
        )

        assert cache.get(STATS_ALL_KEY) is None
        assert cache.get(stats_cache_key(str(booth_row.id))) is None
        assert admin_client.get("/api/admin/stats").json()["total_operations"] == 1

    def test_operation_delete_invalidates_stats(self, admin_client: APIClient, booth_row):
        operation = models.BoothOperation.objects.create(
            booth=booth_row, operator_name="Kim", started_at=timezone.now()
        )
        admin_client.get("/api/admin/stats")

        operation.delete()

        assert cache.get(STATS_ALL_KEY) is None

    def test_other_booth_key_survives(self, admin_client: APIClient, booth_row):
        other = models.Booth.objects.create(name="Chemistry", code="CHE222")
        admin_client.get("/api/admin/stats", {"booth_id": str(other.id)})

        models.BoothOperation.objects.create(
            booth=booth_row, operator_name="Kim", started_at=timezone.now()
        )

        assert cache.get(stats_cache_key(str(other.id))) is not None

    def test_uppercase_booth_id_shares_canonical_key(self, admin_client: APIClient, booth_row):
        """Any spelling of the booth UUID caches under one key that saves invalidate."""
        admin_client.get("/api/admin/stats", {"booth_id": str(booth_row.id).upper()})
        assert cache.get(stats_cache_key(str(booth_row.id))) is not None

        models.BoothOperation.objects.create(
            booth=booth_row, operator_name="Kim", started_at=timezone.now()
        )

        response = admin_client.get("/api/admin/stats", {"booth_id": str(booth_row.id).upper()})
        assert response.json()["total_operations"] == 1

    def test_malformed_booth_id_is_rejected(self, admin_client: APIClient):
        response = admin_client.get("/api/admin/stats", {"booth_id": "not-a-uuid"})

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_ID"

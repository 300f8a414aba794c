"""Cache keys for admin statistics."""

from django.core.cache import cache

STATS_ALL_KEY = "booths:stats:all"


def stats_cache_key(booth_id: str | None) -> str:
    return f"booths:stats:{booth_id}" if booth_id else STATS_ALL_KEY


def invalidate_stats(booth_id: str) -> None:
    cache.delete_many([STATS_ALL_KEY, stats_cache_key(booth_id)])

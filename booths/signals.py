"""Django signals for cache invalidation."""

from django.db.models.signals import post_delete, post_save
from django.dispatch import receiver

from booths.cache import invalidate_stats
from booths.models import BoothOperation


@receiver([post_save, post_delete], sender=BoothOperation)
def invalidate_operation_stats(sender, instance, **kwargs):
    """Invalidate cached stats when an operation is started, closed or deleted."""
    invalidate_stats(str(instance.booth_id))

"""Django signals for cache invalidation.

Seat changes always rewrite the screening's ``available_seats``, so the
screening signals also cover the seat map.
"""

from functools import partial

from django.db import transaction
from django.db.models.signals import post_delete, post_save
from django.dispatch import receiver

from reservations.cache import invalidate_screening
from reservations.models import Screening


@receiver([post_save, post_delete], sender=Screening)
def invalidate_screening_cache(sender, instance, **kwargs):
    """Invalidate caches when a screening is saved or deleted."""
    transaction.on_commit(partial(invalidate_screening, instance.pk))

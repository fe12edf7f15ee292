"""Cache keys for screening read endpoints."""

from django.core.cache import cache


def screening_key(screening_id: int) -> str:
    return f"screenings:{screening_id}"


def seats_key(screening_id: int) -> str:
    return f"screenings:{screening_id}:seats"


def invalidate_screening(screening_id: int) -> None:
    cache.delete_many([screening_key(screening_id), seats_key(screening_id)])

"""Persistence for daily good-location ratings."""

from surfcheck.storage.rating_store import (
    RatingStore,
    RatingStoreError,
    StoredRating,
    as_date,
)

__all__ = [
    "RatingStore",
    "RatingStoreError",
    "StoredRating",
    "as_date",
]

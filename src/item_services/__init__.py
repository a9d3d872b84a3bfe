from __future__ import annotations

"""Composable asynchronous item loading with fallback and retry."""

from item_services.models import Card, Friend, ItemViewModel, LoadResult, Transfer
from item_services.services import ItemService, with_fallback, with_retry

__all__ = [
    "Card",
    "Friend",
    "ItemService",
    "ItemViewModel",
    "LoadResult",
    "Transfer",
    "with_fallback",
    "with_retry",
]

from __future__ import annotations

from item_services.services.base import (
    ComposableItemService,
    ItemService,
    ItemsServiceWithFallback,
    with_fallback,
    with_retry,
)
from item_services.services.cards import CardAPIItemsServiceAdapter
from item_services.services.friends import FriendsAPIItemsServiceAdapter, FriendsCacheItemsServiceAdapter
from item_services.services.traced import TracedItemService
from item_services.services.transfers import (
    ReceivedTransfersAPIItemsServiceAdapter,
    SentTransfersAPIItemsServiceAdapter,
)

__all__ = [
    "CardAPIItemsServiceAdapter",
    "ComposableItemService",
    "FriendsAPIItemsServiceAdapter",
    "FriendsCacheItemsServiceAdapter",
    "ItemService",
    "ItemsServiceWithFallback",
    "ReceivedTransfersAPIItemsServiceAdapter",
    "SentTransfersAPIItemsServiceAdapter",
    "TracedItemService",
    "with_fallback",
    "with_retry",
]

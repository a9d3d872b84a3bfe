from __future__ import annotations

"""Composition root: builds the list services the presentation layer consumes."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path

from item_services.api import CardAPI, FriendsAPI, HTTPItemsAPI, TransfersAPI
from item_services.cache import FriendsCache, InMemoryFriendsCache, JSONFileFriendsCache, NullFriendsCache
from item_services.config import RuntimeConfig
from item_services.models import Card, Friend, Transfer
from item_services.services import (
    CardAPIItemsServiceAdapter,
    FriendsAPIItemsServiceAdapter,
    FriendsCacheItemsServiceAdapter,
    ItemService,
    ReceivedTransfersAPIItemsServiceAdapter,
    SentTransfersAPIItemsServiceAdapter,
    TracedItemService,
    with_fallback,
    with_retry,
)


LOGGER = logging.getLogger(__name__)


def _log_selection(kind: str) -> Callable[[object], None]:
    def _select(item: object) -> None:
        LOGGER.info("Selected %s: %r", kind, item)

    return _select


@dataclass(slots=True)
class SelectionHandlers:
    """Callbacks fired with the raw item behind a selected view model."""

    friend: Callable[[Friend], None] = field(default_factory=lambda: _log_selection("friend"))
    card: Callable[[Card], None] = field(default_factory=lambda: _log_selection("card"))
    transfer: Callable[[Transfer], None] = field(default_factory=lambda: _log_selection("transfer"))


@dataclass(frozen=True, slots=True)
class ItemServices:
    friends: ItemService
    sent_transfers: ItemService
    received_transfers: ItemService
    cards: ItemService
    friends_cache: FriendsCache | None = None

    async def flush(self) -> None:
        """Wait for cache writes started by earlier loads."""
        if self.friends_cache is not None:
            await self.friends_cache.flush()

    def as_dict(self) -> dict[str, ItemService]:
        return {
            "friends": self.friends,
            "sent_transfers": self.sent_transfers,
            "received_transfers": self.received_transfers,
            "cards": self.cards,
        }


def build_friends_cache(config: RuntimeConfig) -> FriendsCache:
    if config.cache_path:
        return JSONFileFriendsCache(Path(config.cache_path))
    return InMemoryFriendsCache()


def build_friends_service(
    config: RuntimeConfig,
    api: FriendsAPI,
    friends_cache: FriendsCache,
    select: Callable[[Friend], None],
) -> ItemService:
    """Friends: retried API loads; premium users also fall back to the cache.

    Non-premium users get a ``NullFriendsCache`` so nothing is persisted for them.
    """
    write_cache = friends_cache if config.premium else NullFriendsCache(reads_from=friends_cache)
    api_service = with_retry(
        FriendsAPIItemsServiceAdapter(api=api, cache=write_cache, select=select),
        config.friends_retry_count,
    )
    if not config.premium:
        return api_service
    return with_fallback(api_service, FriendsCacheItemsServiceAdapter(cache=friends_cache, select=select))


def build_item_services(
    config: RuntimeConfig,
    *,
    friends_api: FriendsAPI | None = None,
    card_api: CardAPI | None = None,
    transfers_api: TransfersAPI | None = None,
    friends_cache: FriendsCache | None = None,
    selection: SelectionHandlers | None = None,
) -> ItemServices:
    """Wire every list service once; APIs default to the configured HTTP client."""
    http_api = None
    if friends_api is None or card_api is None or transfers_api is None:
        http_api = HTTPItemsAPI(config.api_base_url, timeout_seconds=config.request_timeout_seconds)
    friends_api = friends_api or http_api
    card_api = card_api or http_api
    transfers_api = transfers_api or http_api
    friends_cache = friends_cache if friends_cache is not None else build_friends_cache(config)
    selection = selection or SelectionHandlers()

    friends = build_friends_service(config, friends_api, friends_cache, selection.friend)
    sent = with_retry(
        SentTransfersAPIItemsServiceAdapter(api=transfers_api, select=selection.transfer),
        config.transfers_retry_count,
    )
    received = with_retry(
        ReceivedTransfersAPIItemsServiceAdapter(api=transfers_api, select=selection.transfer),
        config.transfers_retry_count,
    )
    cards = with_retry(
        CardAPIItemsServiceAdapter(api=card_api, select=selection.card),
        config.cards_retry_count,
    )
    return ItemServices(
        friends=TracedItemService(friends, "load_friends"),
        sent_transfers=TracedItemService(sent, "load_sent_transfers"),
        received_transfers=TracedItemService(received, "load_received_transfers"),
        cards=TracedItemService(cards, "load_cards"),
        friends_cache=friends_cache,
    )

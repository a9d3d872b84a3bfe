from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from functools import partial
import logging
from typing import TYPE_CHECKING

from item_services.models import Friend, ItemViewModel
from item_services.services.base import ComposableItemService

if TYPE_CHECKING:
    from item_services.api import FriendsAPI
    from item_services.cache import FriendsCache


LOGGER = logging.getLogger(__name__)


def _friend_views(friends: Sequence[Friend], select: Callable[[Friend], None]) -> list[ItemViewModel]:
    return [ItemViewModel.for_friend(friend, partial(select, friend)) for friend in friends]


@dataclass(frozen=True, slots=True)
class FriendsAPIItemsServiceAdapter(ComposableItemService):
    """Loads friends from the API and keeps the cache up to date.

    The cache write happens only after a successful load and can never turn
    that load into a failure.
    """

    api: FriendsAPI
    cache: FriendsCache
    select: Callable[[Friend], None]

    async def load_items(self) -> list[ItemViewModel]:
        friends = await self.api.load_friends()
        try:
            self.cache.save(friends)
        except Exception as exc:  # noqa: BLE001
            LOGGER.warning("Saving %d friends to cache failed: %s", len(friends), exc)
        return _friend_views(friends, self.select)


@dataclass(frozen=True, slots=True)
class FriendsCacheItemsServiceAdapter(ComposableItemService):
    cache: FriendsCache
    select: Callable[[Friend], None]

    async def load_items(self) -> list[ItemViewModel]:
        friends = await self.cache.load_friends()
        return _friend_views(friends, self.select)

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from functools import partial
from typing import TYPE_CHECKING

from item_services.models import Card, ItemViewModel
from item_services.services.base import ComposableItemService

if TYPE_CHECKING:
    from item_services.api import CardAPI


@dataclass(frozen=True, slots=True)
class CardAPIItemsServiceAdapter(ComposableItemService):
    api: CardAPI
    select: Callable[[Card], None]

    async def load_items(self) -> list[ItemViewModel]:
        cards = await self.api.load_cards()
        return [ItemViewModel.for_card(card, partial(self.select, card)) for card in cards]

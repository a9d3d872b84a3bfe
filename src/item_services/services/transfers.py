from __future__ import annotations

"""Sent and received transfer lists.

Both adapters read the same combined transfers endpoint and split it on
``Transfer.is_sender``, so together they partition every upstream response.
"""

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from functools import partial
from typing import TYPE_CHECKING

from item_services.models import ItemViewModel, Transfer
from item_services.services.base import ComposableItemService

if TYPE_CHECKING:
    from item_services.api import TransfersAPI


def sent_transfers(transfers: Sequence[Transfer]) -> list[Transfer]:
    return [t for t in transfers if t.is_sender]


def received_transfers(transfers: Sequence[Transfer]) -> list[Transfer]:
    return [t for t in transfers if not t.is_sender]


@dataclass(frozen=True, slots=True)
class SentTransfersAPIItemsServiceAdapter(ComposableItemService):
    api: TransfersAPI
    select: Callable[[Transfer], None]

    async def load_items(self) -> list[ItemViewModel]:
        transfers = await self.api.load_transfers()
        return [
            ItemViewModel.for_transfer(t, partial(self.select, t), long_date_style=True)
            for t in sent_transfers(transfers)
        ]


@dataclass(frozen=True, slots=True)
class ReceivedTransfersAPIItemsServiceAdapter(ComposableItemService):
    api: TransfersAPI
    select: Callable[[Transfer], None]

    async def load_items(self) -> list[ItemViewModel]:
        transfers = await self.api.load_transfers()
        return [
            ItemViewModel.for_transfer(t, partial(self.select, t), long_date_style=False)
            for t in received_transfers(transfers)
        ]

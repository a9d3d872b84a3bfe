from __future__ import annotations

from dataclasses import dataclass

from item_services.models import ItemViewModel
from item_services.services.base import ComposableItemService, ItemService
from item_services.tracing import traceable


@dataclass(frozen=True, slots=True)
class TracedItemService(ComposableItemService):
    """Reports each load of ``service`` as a span named ``name``."""

    service: ItemService
    name: str

    async def load_items(self) -> list[ItemViewModel]:
        load = traceable(name=self.name, run_type="retriever")(self.service.load_items)
        return await load()

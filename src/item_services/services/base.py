from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Protocol

from item_services.models import ItemViewModel


LOGGER = logging.getLogger(__name__)


class ItemService(Protocol):
    """Anything that can asynchronously load a list of item view models.

    Failures surface as exceptions and are never wrapped on the way out.
    """

    async def load_items(self) -> list[ItemViewModel]:
        ...


class ComposableItemService:
    """Base for the bundled services: adds ``fallback`` and ``retry`` chaining.

    Any other ``ItemService`` composes through ``with_fallback`` / ``with_retry``.
    """

    __slots__ = ()

    async def load_items(self) -> list[ItemViewModel]:
        raise NotImplementedError

    def fallback(self, fallback: ItemService) -> ComposableItemService:
        return with_fallback(self, fallback)

    def retry(self, retry_count: int) -> ComposableItemService:
        return with_retry(self, retry_count)


@dataclass(frozen=True, slots=True)
class ItemsServiceWithFallback(ComposableItemService):
    """Try ``primary`` and only on failure load from ``fallback_service``."""

    primary: ItemService
    fallback_service: ItemService

    async def load_items(self) -> list[ItemViewModel]:
        try:
            return await self.primary.load_items()
        except Exception as exc:  # noqa: BLE001
            LOGGER.debug("Primary %r failed (%s); loading from fallback", self.primary, exc)
        return await self.fallback_service.load_items()


def with_fallback(primary: ItemService, fallback: ItemService) -> ItemsServiceWithFallback:
    return ItemsServiceWithFallback(primary, fallback)


def with_retry(service: ItemService, retry_count: int) -> ItemService:
    """Chain ``service`` to itself so it gets up to ``retry_count + 1`` attempts.

    Every extra attempt is a fallback onto the very same service, so any side
    effect of a successful attempt (such as a cache write) happens exactly as
    it would without retries.
    """
    if retry_count < 0:
        raise ValueError("retry_count must be >= 0")
    composed = service
    for _ in range(retry_count):
        composed = with_fallback(composed, service)
    return composed

from __future__ import annotations

"""Delivery of load results onto one designated event loop.

Callers that live outside asyncio (worker threads, GUI toolkits bridging into a
loop) hand a service and a completion callback to ``MainLoopDispatcher.load``;
the completion always runs on the dispatcher's loop, exactly once.
"""

import asyncio
import concurrent.futures
import logging
from collections.abc import Callable
from typing import Any

from item_services.models import LoadResult
from item_services.services.base import ItemService


LOGGER = logging.getLogger(__name__)

Completion = Callable[[LoadResult], None]


async def load_result(service: ItemService) -> LoadResult:
    """Await ``service`` and fold its outcome into a ``LoadResult``."""
    try:
        items = await service.load_items()
    except Exception as exc:  # noqa: BLE001
        LOGGER.debug("Load from %r failed: %s", service, exc)
        return LoadResult.failure(exc)
    return LoadResult.success(items)


class MainLoopDispatcher:
    def __init__(self, loop: asyncio.AbstractEventLoop) -> None:
        self.loop = loop

    @classmethod
    def for_running_loop(cls) -> "MainLoopDispatcher":
        return cls(asyncio.get_running_loop())

    def is_current(self) -> bool:
        try:
            return asyncio.get_running_loop() is self.loop
        except RuntimeError:
            return False

    def dispatch(self, fn: Callable[..., Any], *args: Any) -> None:
        """Run ``fn`` on the loop, inline when already there."""
        if self.is_current():
            fn(*args)
        else:
            self.loop.call_soon_threadsafe(fn, *args)

    async def _load_and_deliver(self, service: ItemService, completion: Completion) -> LoadResult:
        result = await load_result(service)
        self.dispatch(completion, result)
        return result

    def load(
        self, service: ItemService, completion: Completion
    ) -> asyncio.Task[LoadResult] | concurrent.futures.Future[LoadResult]:
        """Start loading ``service`` on the loop; safe to call from any thread."""
        coro = self._load_and_deliver(service, completion)
        if self.is_current():
            return self.loop.create_task(coro)
        return asyncio.run_coroutine_threadsafe(coro, self.loop)

from __future__ import annotations

"""Upstream item APIs consumed by the service adapters."""

import asyncio
import threading
from collections.abc import Sequence
from typing import Protocol

from item_services.models import Card, Friend, Transfer
from item_services.services.common import UpstreamError, expect_list, fetch_json


class FriendsAPI(Protocol):
    async def load_friends(self) -> list[Friend]:
        ...


class CardAPI(Protocol):
    async def load_cards(self) -> list[Card]:
        ...


class TransfersAPI(Protocol):
    async def load_transfers(self) -> list[Transfer]:
        ...


class HTTPItemsAPI:
    """JSON-over-HTTP client for the friends, cards and transfers endpoints."""

    def __init__(self, base_url: str, timeout_seconds: float = 10) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout_seconds = timeout_seconds

    async def _get_rows(self, resource: str) -> list[dict]:
        payload = await asyncio.to_thread(
            fetch_json,
            f"{self.base_url}/{resource}",
            timeout_seconds=self.timeout_seconds,
        )
        return expect_list(payload, resource)

    async def load_friends(self) -> list[Friend]:
        rows = await self._get_rows("friends")
        return _decode(rows, Friend.from_dict, "friends")

    async def load_cards(self) -> list[Card]:
        rows = await self._get_rows("cards")
        return _decode(rows, Card.from_dict, "cards")

    async def load_transfers(self) -> list[Transfer]:
        rows = await self._get_rows("transfers")
        return _decode(rows, Transfer.from_dict, "transfers")


def _decode(rows, decoder, resource: str) -> list:
    try:
        return [decoder(row) for row in rows]
    except (KeyError, TypeError, ValueError) as exc:
        raise UpstreamError(f"Malformed {resource} row: {exc}") from exc


class StaticItemsAPI:
    """In-memory upstream serving fixed data.

    The first ``failures`` calls of each resource raise ``UpstreamError``, which
    makes retry and fallback wiring easy to exercise without a network.
    """

    def __init__(
        self,
        friends: Sequence[Friend] = (),
        cards: Sequence[Card] = (),
        transfers: Sequence[Transfer] = (),
        failures: int = 0,
    ) -> None:
        self._data = {"friends": list(friends), "cards": list(cards), "transfers": list(transfers)}
        self._remaining_failures = {key: failures for key in self._data}
        self._lock = threading.Lock()
        self.calls: dict[str, int] = {key: 0 for key in self._data}

    async def _serve(self, resource: str) -> list:
        with self._lock:
            self.calls[resource] += 1
            if self._remaining_failures[resource] > 0:
                self._remaining_failures[resource] -= 1
                raise UpstreamError(f"{resource} temporarily unavailable")
            rows = list(self._data[resource])
        await asyncio.sleep(0)
        return rows

    async def load_friends(self) -> list[Friend]:
        return await self._serve("friends")

    async def load_cards(self) -> list[Card]:
        return await self._serve("cards")

    async def load_transfers(self) -> list[Transfer]:
        return await self._serve("transfers")

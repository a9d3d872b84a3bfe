from __future__ import annotations

"""Friends caches.

``NullFriendsCache`` is the drop-in used when caching is turned off: writes
are discarded, so the adapters never need to branch on whether caching is
enabled.
"""

import asyncio
import json
import logging
import threading
from collections.abc import Sequence
from pathlib import Path
from typing import Protocol

from item_services.models import Friend
from item_services.services.common import CacheMissError


LOGGER = logging.getLogger(__name__)


class FriendsCache(Protocol):
    def save(self, friends: Sequence[Friend]) -> None:
        ...

    async def load_friends(self) -> list[Friend]:
        ...

    async def flush(self) -> None:
        ...


class InMemoryFriendsCache:
    def __init__(self) -> None:
        self._friends: tuple[Friend, ...] | None = None
        self._lock = threading.Lock()

    def save(self, friends: Sequence[Friend]) -> None:
        with self._lock:
            self._friends = tuple(friends)

    async def load_friends(self) -> list[Friend]:
        with self._lock:
            friends = self._friends
        if friends is None:
            raise CacheMissError("No friends cached yet")
        return list(friends)

    async def flush(self) -> None:
        pass


class JSONFileFriendsCache:
    """Friends cache persisted as a JSON document on disk.

    When called from a running event loop, ``save`` hands the disk write to a
    worker thread and returns immediately; ``flush`` waits for those writes.
    A write never overwrites the file with an older snapshot.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self._lock = threading.Lock()
        self._saved_version = 0
        self._written_version = 0
        self._pending: set[asyncio.Task[None]] = set()

    def save(self, friends: Sequence[Friend]) -> None:
        payload = json.dumps({"friends": [f.to_dict() for f in friends]}, indent=2)
        with self._lock:
            self._saved_version += 1
            version = self._saved_version
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            self._write(payload, version, len(friends))
            return
        task = loop.create_task(asyncio.to_thread(self._write, payload, version, len(friends)))
        self._pending.add(task)
        task.add_done_callback(self._write_done)

    def _write_done(self, task: asyncio.Task[None]) -> None:
        self._pending.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            LOGGER.warning("Writing friends cache to %s failed: %s", self.path, exc)

    def _write(self, payload: str, version: int, count: int) -> None:
        with self._lock:
            if version <= self._written_version:
                return
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
            tmp_path.write_text(payload, encoding="utf-8")
            tmp_path.replace(self.path)
            self._written_version = version
        LOGGER.debug("Cached %d friends at %s", count, self.path)

    async def flush(self) -> None:
        if self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    def _read(self) -> list[Friend]:
        with self._lock:
            try:
                content = self.path.read_text(encoding="utf-8")
            except FileNotFoundError as exc:
                raise CacheMissError(f"No friends cache at {self.path}") from exc
        try:
            rows = json.loads(content)["friends"]
            return [Friend.from_dict(row) for row in rows]
        except (KeyError, TypeError, ValueError) as exc:
            raise CacheMissError(f"Unreadable friends cache at {self.path}: {exc}") from exc

    async def load_friends(self) -> list[Friend]:
        return await asyncio.to_thread(self._read)


class NullFriendsCache:
    """Cache that never stores anything.

    Reads go to ``reads_from`` when one is given, otherwise they miss.
    """

    def __init__(self, reads_from: FriendsCache | None = None) -> None:
        self.reads_from = reads_from

    def save(self, friends: Sequence[Friend]) -> None:
        pass

    async def load_friends(self) -> list[Friend]:
        if self.reads_from is None:
            raise CacheMissError("Caching is disabled")
        return await self.reads_from.load_friends()

    async def flush(self) -> None:
        pass

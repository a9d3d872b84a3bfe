from __future__ import annotations

import json
import logging
from typing import Any
from urllib.request import Request, urlopen


USER_AGENT = "item-services/0.1 (+items client)"
LOGGER = logging.getLogger(__name__)


class ItemsServiceError(RuntimeError):
    pass


class UpstreamError(ItemsServiceError):
    pass


class CacheMissError(ItemsServiceError):
    pass


def fetch_json(url: str, timeout_seconds: float = 10) -> Any:
    """GET ``url`` once and decode the JSON body, raising ``UpstreamError`` on failure.

    Blocking; callers on an event loop run this in a worker thread. Retries
    belong to the service layer (``with_retry``), not to this helper.
    """
    request = Request(url, headers={"User-Agent": USER_AGENT, "Accept": "application/json"})
    try:
        with urlopen(request, timeout=timeout_seconds) as response:
            content = response.read().decode("utf-8")
        return json.loads(content)
    except (OSError, ValueError) as exc:
        LOGGER.debug("Fetch of %s failed: %s", url, exc)
        raise UpstreamError(f"Could not load {url}: {exc}") from exc


def expect_list(payload: Any, key: str) -> list[dict[str, Any]]:
    """Accept either a bare JSON list or ``{key: [...]}`` envelopes."""
    rows = payload.get(key) if isinstance(payload, dict) else payload
    if not isinstance(rows, list) or not all(isinstance(row, dict) for row in rows):
        raise UpstreamError(f"Malformed {key} payload")
    return rows

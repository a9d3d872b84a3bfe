from __future__ import annotations

"""Runtime configuration defaults for the item services wiring."""

import os
from dataclasses import dataclass


def env_truthy(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name, str(default)).strip()
    try:
        value = int(raw)
    except ValueError:
        return default
    return max(0, min(value, 10))


@dataclass(slots=True)
class RuntimeConfig:
    """Settings resolved once at wiring time."""

    api_base_url: str = "http://localhost:8000/api"
    request_timeout_seconds: float = 10.0
    friends_retry_count: int = 2
    transfers_retry_count: int = 1
    cards_retry_count: int = 0
    premium: bool = False
    cache_path: str | None = None

    @classmethod
    def from_env(cls) -> "RuntimeConfig":
        """Build a config from ``ITEM_SERVICES_*`` environment variables."""
        defaults = cls()
        raw_timeout = os.getenv("ITEM_SERVICES_TIMEOUT_SECONDS")
        try:
            timeout = float(raw_timeout) if raw_timeout else defaults.request_timeout_seconds
        except ValueError:
            timeout = defaults.request_timeout_seconds
        return cls(
            api_base_url=os.getenv("ITEM_SERVICES_API_BASE_URL", defaults.api_base_url),
            request_timeout_seconds=timeout,
            friends_retry_count=_env_int("ITEM_SERVICES_FRIENDS_RETRIES", defaults.friends_retry_count),
            transfers_retry_count=_env_int("ITEM_SERVICES_TRANSFERS_RETRIES", defaults.transfers_retry_count),
            cards_retry_count=_env_int("ITEM_SERVICES_CARDS_RETRIES", defaults.cards_retry_count),
            premium=env_truthy("ITEM_SERVICES_PREMIUM", defaults.premium),
            cache_path=os.getenv("ITEM_SERVICES_CACHE_PATH") or defaults.cache_path,
        )


DEFAULT_CONFIG = RuntimeConfig()

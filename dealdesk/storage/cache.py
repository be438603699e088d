"""
TTL cache on top of a KeyValueStore.

Entries are stored as JSON `{"data", "timestamp", "ttl"}` with timestamp and
ttl in milliseconds. Eviction is lazy: an expired entry is deleted only when
it is read. Malformed entries are cache misses.
"""

import json
import time
from typing import Any, Callable, Optional

from .kv_store import KeyValueStore
from ..utils.logger import get_logger

logger = get_logger(__name__)

FINANCIAL_CACHE_PREFIX = "financial_"


def cache_key_for_symbol(symbol: str) -> str:
    """Cache key for a ticker's financial record."""
    return f"{FINANCIAL_CACHE_PREFIX}{symbol}"


def _now_ms() -> float:
    return time.time() * 1000


class TTLCache:
    """
    Key-value cache with per-entry time-to-live.

    Args:
        store: Backing KeyValueStore
        clock: Callable returning the current time in epoch milliseconds
    """

    def __init__(self, store: KeyValueStore, clock: Optional[Callable[[], float]] = None):
        self.store = store
        self._clock = clock or _now_ms

    def set(self, key: str, value: Any, ttl: float) -> None:
        """Store a JSON-serializable value for `ttl` milliseconds."""
        entry = {
            'data': value,
            'timestamp': self._clock(),
            'ttl': ttl,
        }
        self.store.set_item(key, json.dumps(entry))

    def get(self, key: str) -> Optional[Any]:
        """Return the cached value, or None if absent, expired or malformed."""
        raw = self.store.get_item(key)
        if raw is None:
            return None

        try:
            entry = json.loads(raw)
            timestamp = float(entry['timestamp'])
            ttl = float(entry['ttl'])
            data = entry['data']
        except (ValueError, TypeError, KeyError) as e:
            logger.debug(f"Cache entry {key} unreadable, treating as miss: {e}")
            return None

        age = self._clock() - timestamp
        if age > ttl:
            logger.debug(f"Cache EXPIRED for {key} (age: {age:.0f}ms)")
            self.store.remove_item(key)
            return None

        logger.debug(f"Cache HIT for {key} (age: {age:.0f}ms)")
        return data

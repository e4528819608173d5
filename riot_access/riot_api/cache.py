"""
LRU cache of Riot API responses keyed by resolved request URL.

Staleness is not handled here: entries carry their own creation time and
the dispatcher decides whether a hit is still fresh.
"""

import threading
from collections import OrderedDict
from typing import Any, Dict, List, Optional

import structlog

from .models import Response

logger = structlog.get_logger(__name__)


class ResponseCache:
    """Capacity-bounded, recency-ordered response store with thread-safe operations."""

    def __init__(self, capacity: int):
        """
        Initialize response cache.

        Args:
            capacity: Maximum number of entries, usually the rolling window limit
        """
        if capacity < 0:
            raise ValueError("Cache capacity must be greater than or equal to 0")
        self._capacity = capacity
        # Least recently used first
        self._entries: "OrderedDict[str, Response]" = OrderedDict()
        self.lock = threading.RLock()
        self._hits = 0
        self._misses = 0
        self._evictions = 0

    @property
    def capacity(self) -> int:
        return self._capacity

    def get(self, key: str) -> Optional[Response]:
        """
        Get a response and mark it most recently used.

        Args:
            key: Resolved request URL

        Returns:
            Cached response if present, None otherwise
        """
        with self.lock:
            response = self._entries.get(key)
            if response is None:
                self._misses += 1
                return None
            self._entries.move_to_end(key)
            self._hits += 1
            logger.debug("Cache hit", hits=self._hits)
            return response

    def put(self, key: str, response: Response) -> None:
        """
        Store a response as the most recently used entry.

        Args:
            key: Resolved request URL
            response: Response to cache
        """
        with self.lock:
            self._entries[key] = response
            self._entries.move_to_end(key)
            self._trim()

    def set_capacity(self, capacity: int) -> None:
        """Change the capacity, evicting excess entries immediately."""
        if capacity < 0:
            raise ValueError("Cache capacity must be greater than or equal to 0")
        with self.lock:
            self._capacity = capacity
            self._trim()

    def clear(self) -> None:
        """Clear all entries from cache."""
        with self.lock:
            count = len(self._entries)
            self._entries.clear()
            self._hits = 0
            self._misses = 0
            self._evictions = 0
            logger.info("Response cache cleared", entries_removed=count)

    def keys(self) -> List[str]:
        """Keys from least to most recently used."""
        with self.lock:
            return list(self._entries)

    def stats(self) -> Dict[str, Any]:
        """Get cache statistics."""
        with self.lock:
            total = self._hits + self._misses
            return {
                "size": len(self._entries),
                "capacity": self._capacity,
                "hits": self._hits,
                "misses": self._misses,
                "evictions": self._evictions,
                "hit_rate": self._hits / total if total > 0 else 0.0,
            }

    def _trim(self) -> None:
        while len(self._entries) > self._capacity:
            self._entries.popitem(last=False)
            self._evictions += 1
            logger.debug("Cache eviction", reason="capacity", capacity=self._capacity)

    def __contains__(self, key: object) -> bool:
        """Membership test without touching recency."""
        with self.lock:
            return key in self._entries

    def __len__(self) -> int:
        """Get number of entries in cache."""
        with self.lock:
            return len(self._entries)

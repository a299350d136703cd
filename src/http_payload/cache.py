"""DiscoveryCache: per-payload memoization of discovery results.

Each ``DiscoveryCache`` instance owns its own ``LRUCache`` - there is no
class-level or module-level shared state, so two payloads never see each
other's results.  Entries are keyed by ``DiscoveryOptions`` value objects and
live until they are invalidated, cleared, or evicted once ``max_size``
distinct requests have been cached.

Example::

    from http_payload.cache import DiscoveryCache
    from http_payload.config import DiscoveryOptions

    cache = DiscoveryCache()
    key = DiscoveryOptions()
    cache.get_or_compute(key, lambda: {"[foo]": 1})   # computed
    cache.get_or_compute(key, lambda: {"[foo]": 2})   # {"[foo]": 1}, served from memory
    cache.clear()                                      # after any mutation
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Hashable
from typing import Any

from cachetools import LRUCache

__all__ = ["DiscoveryCache"]

logger = logging.getLogger(__name__)


class DiscoveryCache:
    """LRU-backed memoization of discovery results for one payload.

    Args:
        max_size: Maximum number of distinct discovery requests held in memory.
            Defaults to 32.  Eviction only costs a recomputation.
    """

    def __init__(self, max_size: int = 32) -> None:
        self._cache: LRUCache[Hashable, dict[str, Any]] = LRUCache(maxsize=max_size)

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def max_size(self) -> int:
        """The maximum number of entries this cache can hold."""
        return int(self._cache.maxsize)

    @property
    def curr_size(self) -> int:
        """The current number of entries stored in the cache."""
        return int(self._cache.currsize)

    def __contains__(self, key: Hashable) -> bool:
        return key in self._cache

    # ------------------------------------------------------------------
    # Memoization
    # ------------------------------------------------------------------

    def get_or_compute(
        self, key: Hashable, producer: Callable[[], dict[str, Any]]
    ) -> dict[str, Any]:
        """Return a copy of the cached result for ``key``, computing it on a miss.

        The stored mapping is never handed out, so callers mutating the
        returned dict cannot corrupt later hits.
        """
        try:
            result = self._cache[key]
        except KeyError:
            result = producer()
            self._cache[key] = result
        return dict(result)

    def invalidate(self, key: Hashable) -> None:
        """Drop the entry for ``key`` if present."""
        self._cache.pop(key, None)

    def clear(self) -> None:
        """Drop every entry."""
        if self._cache.currsize:
            logger.debug("Clearing %d cached discovery result(s)", self._cache.currsize)
        self._cache.clear()

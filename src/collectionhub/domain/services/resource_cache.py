"""Resource cache for collections with TTL support.

Provides an in-memory, process-wide cache of materialized collections keyed
by collection id. Thread-safe implementation for concurrent access.

The cache is constructed once per process and handed to every repository.
Every id carries a generation that ``set``, ``invalidate`` and
``invalidate_all`` advance. A reader records the generation before loading
from the database and fills the cache with ``set_if_generation``, so a load
that raced with a committed write is never cached.
"""

import threading
import time
from dataclasses import dataclass
from typing import Iterable

from collectionhub.domain.entities import Collection


@dataclass
class CacheEntry:
    """Cache entry with TTL support.

    Attributes:
        value: The cached collection.
        expires_at: Unix timestamp when this entry expires.
    """

    value: Collection
    expires_at: float


class ResourceCache:
    """Thread-safe TTL-based cache for collections."""

    def __init__(self, ttl_seconds: int = 1800):
        """Initialize the cache.

        Args:
            ttl_seconds: Time-to-live for cache entries in seconds (default: 30 minutes).
        """
        self.ttl_seconds = ttl_seconds
        self._cache: dict[str, CacheEntry] = {}
        self._generations: dict[str, int] = {}
        self._epoch = 0
        self._lock = threading.RLock()

    def generation(self, collection_id: str) -> tuple[int, int]:
        """Get the current generation token for a collection id."""
        with self._lock:
            return self._epoch, self._generations.get(collection_id, 0)

    def generations(self, collection_ids: Iterable[str]) -> dict[str, tuple[int, int]]:
        """Get the current generation token for each of ``collection_ids``."""
        with self._lock:
            return {cid: self.generation(cid) for cid in collection_ids}

    def _bump(self, collection_id: str) -> None:
        self._generations[collection_id] = self._generations.get(collection_id, 0) + 1

    def get(self, collection_id: str) -> Collection | None:
        """Get a cached collection.

        Returns:
            Cached collection if found and not expired, None otherwise.
        """
        with self._lock:
            entry = self._cache.get(collection_id)
            if entry is None:
                return None

            if time.time() > entry.expires_at:
                del self._cache[collection_id]
                return None

            return entry.value

    def get_many(self, collection_ids: Iterable[str]) -> dict[str, Collection]:
        """Get every cached collection among ``collection_ids``.

        Returns:
            Mapping of id to collection for the ids that were cached.
        """
        with self._lock:
            found = {}
            for collection_id in collection_ids:
                value = self.get(collection_id)
                if value is not None:
                    found[collection_id] = value
            return found

    def set(self, collection: Collection) -> None:
        """Store a collection in the cache."""
        expires_at = time.time() + self.ttl_seconds

        with self._lock:
            self._bump(collection.id)
            self._cache[collection.id] = CacheEntry(value=collection, expires_at=expires_at)

    def set_if_generation(self, collection: Collection, generation: tuple[int, int]) -> bool:
        """Store a collection only if its id has not changed since ``generation``.

        Args:
            collection: Collection loaded from the database.
            generation: Token from ``generation()`` taken before the load.

        Returns:
            True if the collection was stored, False if the load was stale.
        """
        with self._lock:
            if self.generation(collection.id) != generation:
                return False
            self.set(collection)
            return True

    def invalidate(self, collection_id: str) -> None:
        """Drop the cache entry for a collection, if any."""
        with self._lock:
            self._bump(collection_id)
            self._cache.pop(collection_id, None)

    def invalidate_all(self) -> None:
        """Clear entire cache."""
        with self._lock:
            self._epoch += 1
            self._generations.clear()
            self._cache.clear()

    def cleanup_expired(self) -> int:
        """Remove all expired entries from cache.

        Returns:
            Number of entries removed.
        """
        with self._lock:
            current_time = time.time()
            keys_to_delete = [
                key for key, entry in self._cache.items()
                if current_time > entry.expires_at
            ]

            for key in keys_to_delete:
                del self._cache[key]

            return len(keys_to_delete)

    def __contains__(self, collection_id: str) -> bool:
        return self.get(collection_id) is not None

    def size(self) -> int:
        """Get current cache size."""
        with self._lock:
            return len(self._cache)

"""
Listing cache for any remote directory.

Wraps another RemoteDirectory and keeps recent directory listings, so the
tree view and the background prefetcher listing the same directory share
one request. File contents pass straight through; they are cached by
ContentCache.
"""

import asyncio
from typing import Dict, List

from cachetools import TTLCache

from ..core.directory import RemoteDirectory
from ..core.entry import FileEntry


class CachingRemoteDirectory(RemoteDirectory):
    """
    Optional listing cache in front of a remote directory.

    Uses Future-based coordination to prevent duplicate concurrent listings
    of the same path.

    Example:
        base = HttpRemoteDirectory("http://localhost:3000/api")
        directory = CachingRemoteDirectory(base, max_size=5000, ttl=30.0)
        manager = init_cache_manager(directory)
    """

    def __init__(
        self,
        base: RemoteDirectory,
        max_size: int = 10000,
        ttl: float = 60.0
    ):
        """
        Initialize caching directory.

        Args:
            base: The underlying remote directory to wrap
            max_size: Maximum number of listings in cache
            ttl: Time-to-live for listings in seconds
        """
        self._base = base
        self._cache: TTLCache = TTLCache(maxsize=max_size, ttl=ttl)
        self._listings_in_progress: Dict[str, asyncio.Future] = {}

        # Statistics
        self.cache_hits = 0
        self.cache_misses = 0
        self.concurrent_waits = 0

    async def list_directory(self, path: str) -> List[FileEntry]:
        """
        List a directory with caching and async coordination.

        This method:
        1. Waits for a listing of the same path already in progress
        2. Checks the cache for a fresh listing
        3. Performs the listing if needed
        4. Shares the result with all waiting tasks
        """
        # 1. Check if listing already in progress
        if path in self._listings_in_progress:
            self.concurrent_waits += 1
            return list(await asyncio.shield(self._listings_in_progress[path]))

        # 2. Check cache
        cached = self._cache.get(path)
        if cached is not None:
            self.cache_hits += 1
            return list(cached)

        # 3. Cache miss - need to list
        self.cache_misses += 1
        future = asyncio.get_running_loop().create_future()
        self._listings_in_progress[path] = future

        try:
            entries = await self._base.list_directory(path)
        except Exception as e:
            future.set_exception(e)
            # Retrieved here so an unawaited failure is not reported at GC
            future.exception()
            raise
        else:
            self._cache[path] = entries
            future.set_result(entries)
            return list(entries)
        finally:
            # The starter was cancelled; waiters must not hang on the future
            if not future.done():
                future.cancel()
            self._listings_in_progress.pop(path, None)

    async def read_text_content(self, path: str) -> str:
        return await self._base.read_text_content(path)

    async def get_details(self, path: str) -> FileEntry:
        return await self._base.get_details(path)

    def invalidate(self, path: str) -> None:
        """Drop the cached listing for one directory."""
        self._cache.pop(path, None)

    def get_cache_stats(self) -> dict:
        """
        Get cache statistics for monitoring and debugging.
        """
        total_requests = self.cache_hits + self.cache_misses
        hit_rate = self.cache_hits / total_requests if total_requests > 0 else 0

        return {
            'cache_hits': self.cache_hits,
            'cache_misses': self.cache_misses,
            'hit_rate': hit_rate,
            'concurrent_waits': self.concurrent_waits,
            'cache_size': len(self._cache),
            'max_size': self._cache.maxsize,
            'ttl': self._cache.ttl
        }

    def clear_cache(self) -> None:
        """
        Clear all cached listings and statistics.
        """
        self._cache.clear()
        self.cache_hits = 0
        self.cache_misses = 0
        self.concurrent_waits = 0

    async def close(self):
        await self._base.close()

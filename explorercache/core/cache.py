"""
In-memory content cache with single-flight fetching.

Maps file paths to their text content and guarantees that a path is never
fetched twice concurrently: every requester of an in-flight path awaits the
same task and receives the same result or the same exception.
"""

import asyncio
import logging
from typing import Dict, Optional

from .directory import RemoteDirectory

logger = logging.getLogger(__name__)


def _consume_outcome(task: asyncio.Task) -> None:
    # Mark the exception as retrieved; awaiters already received it.
    if not task.cancelled():
        task.exception()


class ContentCache:
    """
    Path → text content store shared by the UI and the prefetcher.

    Entries are immutable once stored and are only removed by clear_for()
    or reset_all(). Fetch failures are never cached, so a failed path can be
    requested again straight away.

    Example:
        cache = ContentCache(HttpRemoteDirectory("http://localhost:3000/api"))
        content = await cache.get_with_cache_priority("/readme.md")
        assert cache.get_cached("/readme.md") == content
    """

    def __init__(self, directory: RemoteDirectory):
        """
        Initialize the cache.

        Args:
            directory: Remote directory used to read file contents
        """
        self._directory = directory
        self._cache: Dict[str, str] = {}
        self._pending: Dict[str, asyncio.Task] = {}
        self._generation = 0

        # Statistics
        self.hits = 0
        self.misses = 0
        self.total_fetched = 0
        self.total_requested = 0
        self.errors = 0
        self.concurrent_waits = 0

    @property
    def generation(self) -> int:
        """Session generation, bumped by every reset_all()."""
        return self._generation

    def get_cached(self, path: str) -> Optional[str]:
        """
        Look up cached content without any I/O.

        Counts a hit or a miss.
        """
        content = self._cache.get(path)
        if content is None:
            self.misses += 1
        else:
            self.hits += 1
        return content

    async def get_with_cache_priority(self, path: str) -> str:
        """
        Get content from the cache, an in-flight fetch, or a new fetch.

        This method:
        1. Returns cached content immediately (counted as a hit)
        2. Joins a fetch already in flight for the path
        3. Otherwise starts a fetch and registers it as pending

        Cancelling the caller does not cancel the shared fetch.

        Raises:
            NetworkError: If the remote read fails
        """
        content = self._cache.get(path)
        if content is not None:
            self.hits += 1
            return content

        task = self._pending.get(path)
        if task is not None:
            self.concurrent_waits += 1
        else:
            self.misses += 1
            task = self._start_fetch(path)

        return await asyncio.shield(task)

    def prefetch(self, path: str) -> Optional[asyncio.Task]:
        """
        Start a background fetch for a path unless it is cached or pending.

        Failures are counted and logged by the fetch itself; nothing is
        raised to the caller.

        Returns:
            The new fetch task, or None if no fetch was needed
        """
        if path in self._cache or path in self._pending:
            return None
        return self._start_fetch(path)

    def _start_fetch(self, path: str) -> asyncio.Task:
        self.total_requested += 1
        task = asyncio.create_task(self._fetch(path, self._generation))
        task.add_done_callback(_consume_outcome)
        self._pending[path] = task
        return task

    async def _fetch(self, path: str, generation: int) -> str:
        """
        Read one file and store it if the fetch is still current.

        A fetch stops being current when clear_for() or reset_all() removed
        its pending entry while it was in flight; its result or error still
        reaches the awaiters but touches neither the cache nor the counters.
        """
        task = asyncio.current_task()
        try:
            content = await self._directory.read_text_content(path)
        except Exception as e:
            if self._pending.get(path) is task:
                self.errors += 1
                logger.warning("Failed to cache content for %s: %s", path, e)
            else:
                logger.debug("Ignoring stale fetch failure for %s (session %d): %s", path, generation, e)
            raise
        else:
            if self._pending.get(path) is task:
                self._cache[path] = content
                self.total_fetched += 1
                logger.debug("Cached %s (%d chars)", path, len(content))
            else:
                logger.debug("Discarding stale fetch result for %s (session %d)", path, generation)
            return content
        finally:
            if self._pending.get(path) is task:
                del self._pending[path]

    def is_cached(self, path: str) -> bool:
        """Check if content for a path is cached."""
        return path in self._cache

    def is_pending(self, path: str) -> bool:
        """Check if a fetch for a path is in flight."""
        return path in self._pending

    def clear_for(self, path: str) -> None:
        """
        Forget the cached content and any pending fetch for a path.

        Idempotent. An in-flight fetch is not aborted; its result is simply
        not stored.
        """
        self._cache.pop(path, None)
        self._pending.pop(path, None)

    def reset_all(self) -> None:
        """
        Clear all entries, pending fetches and statistics.

        Starts a new session generation, so fetches still in flight from
        the previous session neither populate the cache nor touch counters.
        """
        self._generation += 1
        self._cache.clear()
        self._pending.clear()
        self.hits = 0
        self.misses = 0
        self.total_fetched = 0
        self.total_requested = 0
        self.errors = 0
        self.concurrent_waits = 0

    async def wait_for_pending(self) -> None:
        """Wait until every fetch currently in flight has finished."""
        while self._pending:
            await asyncio.wait(set(self._pending.values()))

    def cancel_pending(self) -> None:
        """Cancel in-flight fetches (used on shutdown only)."""
        for task in list(self._pending.values()):
            task.cancel()
        self._pending.clear()

    @property
    def size(self) -> int:
        """Number of cached entries."""
        return len(self._cache)

    @property
    def pending_count(self) -> int:
        """Number of fetches in flight."""
        return len(self._pending)

    def get_cache_stats(self) -> dict:
        """
        Get cache statistics for monitoring and debugging.
        """
        total_lookups = self.hits + self.misses
        hit_rate = self.hits / total_lookups if total_lookups > 0 else 0

        return {
            'hits': self.hits,
            'misses': self.misses,
            'hit_rate': hit_rate,
            'total_fetched': self.total_fetched,
            'total_requested': self.total_requested,
            'errors': self.errors,
            'concurrent_waits': self.concurrent_waits,
            'cache_size': len(self._cache),
            'pending_count': len(self._pending),
        }

"""High-level API for explorer-cache.

CacheManager is the one object a browsing session talks to. It owns the
content cache, the traversal scheduler and the lifecycle controller, and
exposes the operations the UI layer needs. Construct exactly one per
session, preferably through init_cache_manager().
"""

import logging
from typing import Optional

from .config import CacheConfig, SchedulerRunState
from .core.cache import ContentCache
from .core.directory import RemoteDirectory
from .core.scheduler import TraversalScheduler
from .errors import ConfigurationError
from .lifecycle import LifecycleController
from .stats import CacheStats

logger = logging.getLogger(__name__)


class CacheManager:
    """Facade over the content cache and background prefetcher.

    Example:
        async with init_cache_manager(HttpRemoteDirectory(base_url)) as manager:
            manager.start_background_caching('/')
            ...
            content = manager.get_cached_content('/readme.md')
            if content is None:
                content = await manager.get_content_with_cache('/readme.md')
    """

    def __init__(self, directory: RemoteDirectory, config: Optional[CacheConfig] = None):
        """Initialize the manager.

        Args:
            directory: Remote directory to read from
            config: Pacing configuration (defaults to CacheConfig())

        Raises:
            ConfigurationError: If the configuration does not validate
        """
        self.config = config or CacheConfig()
        problems = self.config.validate()
        if problems:
            raise ConfigurationError("; ".join(problems))

        self.directory = directory
        self.cache = ContentCache(directory)
        self.scheduler = TraversalScheduler(directory, self.cache, self.config)
        self.lifecycle = LifecycleController(self.scheduler)

    # Background traversal

    def start_background_caching(self, root_path: str = '/') -> None:
        self.scheduler.start(root_path)

    def prioritize_caching_for_directory(self, path: str) -> None:
        self.scheduler.prioritize(path)

    def pause_caching(self) -> None:
        self.scheduler.pause()

    def resume_caching(self) -> None:
        self.scheduler.resume()

    @property
    def state(self) -> SchedulerRunState:
        return self.scheduler.state

    async def wait_until_idle(self) -> None:
        """Wait for the running traversal to drain or pause.

        Also waits for interactive fetches still in flight, so the cache is
        settled when this returns.
        """
        await self.scheduler.join()
        await self.cache.wait_for_pending()

    # Content access

    def get_cached_content(self, path: str) -> Optional[str]:
        return self.cache.get_cached(path)

    async def get_content_with_cache(self, path: str) -> str:
        return await self.cache.get_with_cache_priority(path)

    def is_content_cached(self, path: str) -> bool:
        return self.cache.is_cached(path)

    def clear_cache_for(self, path: str) -> None:
        self.cache.clear_for(path)

    # Observability

    def get_cache_stats(self) -> CacheStats:
        """Snapshot of all counters.

        Computed without awaiting, so no update can land halfway through.
        """
        cache = self.cache
        scheduler = self.scheduler
        return CacheStats(
            hits=cache.hits,
            misses=cache.misses,
            total_fetched=cache.total_fetched,
            total_requested=cache.total_requested,
            errors=cache.errors + scheduler.errors,
            cache_size=cache.size,
            pending_count=cache.pending_count,
            visited_count=scheduler.visited_count,
            queue_size=scheduler.queue_size,
            active=scheduler.active,
            paused=scheduler.paused,
        )

    # Session

    def reset_cache_state(self) -> None:
        """Clear cache, pending fetches, queue, visited set and counters."""
        self.scheduler.reset()
        self.cache.reset_all()

    async def close(self) -> None:
        """Stop the traversal, cancel fetches and close the remote directory."""
        await self.scheduler.close()
        self.cache.cancel_pending()
        await self.directory.close()

    async def __aenter__(self):
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()


def init_cache_manager(
    directory: RemoteDirectory,
    config: Optional[CacheConfig] = None,
) -> CacheManager:
    """Create the session's cache manager with a clean state.

    Args:
        directory: Remote directory to read from
        config: Pacing configuration

    Returns:
        A ready CacheManager
    """
    logger.info("Initializing file content cache system")
    manager = CacheManager(directory, config)
    manager.reset_cache_state()
    return manager

"""Level-synchronized breadth-first prefetch scheduler.

Walks the remote directory tree one level at a time: every queued directory
at depth N is enumerated (and its text files handed to the content cache)
before any directory at depth N+1 is visited. The walk runs as a single
background task that can be paused and resumed without losing or
duplicating queued work.
"""

import asyncio
import logging
from collections import deque
from dataclasses import dataclass
from typing import Deque, List, Optional, Set, Tuple

from ..config import CacheConfig, SchedulerRunState
from ..error_policies import ContinueOnErrorsPolicy, ErrorPolicy
from ..errors import TraversalError
from ..file_types import is_text_file
from .cache import ContentCache
from .directory import RemoteDirectory

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class QueueItem:
    """A directory still to be enumerated and its breadth-first depth."""
    path: str
    level: int

    @property
    def key(self) -> Tuple[str, int]:
        return (self.path, self.level)


class TraversalScheduler:
    """Background breadth-first traversal that feeds the content cache.

    Pacing between units of work comes from CacheConfig. All state is
    mutated on the event loop thread only; scheduling decisions never
    interleave except at await points.
    """

    def __init__(
        self,
        directory: RemoteDirectory,
        cache: ContentCache,
        config: Optional[CacheConfig] = None,
    ):
        """Initialize the scheduler.

        Args:
            directory: Remote directory to enumerate
            cache: Content cache that receives file fetches
            config: Pacing configuration (defaults to CacheConfig())
        """
        self._directory = directory
        self._cache = cache
        self.config = config or CacheConfig()
        self.error_policy: ErrorPolicy = self.config.error_policy or ContinueOnErrorsPolicy()

        self._queue: Deque[QueueItem] = deque()
        self._enqueued: Set[Tuple[str, int]] = set()
        self._visited: Set[str] = set()
        self._deferred_files: Deque[str] = deque()
        self._prefetches: Set[asyncio.Task] = set()

        self._active = False
        self._paused = False
        self._runner: Optional[asyncio.Task] = None

        self.errors = 0
        self.last_error: Optional[TraversalError] = None

    # ------------------------------------------------------------------
    # State

    @property
    def state(self) -> SchedulerRunState:
        if self._paused:
            return SchedulerRunState.PAUSED
        if self._active:
            return SchedulerRunState.ACTIVE
        return SchedulerRunState.IDLE

    @property
    def active(self) -> bool:
        return self._active

    @property
    def paused(self) -> bool:
        return self._paused

    @property
    def queue_size(self) -> int:
        return len(self._queue)

    @property
    def visited_count(self) -> int:
        return len(self._visited)

    def queued_items(self) -> List[QueueItem]:
        """Snapshot of the pending queue, front first."""
        return list(self._queue)

    def was_visited(self, path: str) -> bool:
        return path in self._visited

    # ------------------------------------------------------------------
    # Control

    def start(self, root_path: str = '/') -> None:
        """Start background caching from a root path.

        No-op if a traversal is already active. The first level runs after
        the configured startup delay so the interactive UI can render first.
        """
        if self._active:
            logger.info("Background caching already running")
            return

        logger.info("Starting background caching from: %s", root_path)
        self._active = True
        self._paused = False
        self._enqueue(root_path, 0)
        self._ensure_runner(self.config.startup_delay)

    def prioritize(self, path: str) -> None:
        """Move a directory to the front of the queue.

        Used when the user shows interest in a directory (e.g. hovering it).
        Already visited directories are ignored.
        """
        if path in self._visited:
            return

        item = QueueItem(path, 0)
        if item.key in self._enqueued:
            try:
                self._queue.remove(item)
            except ValueError:
                pass
        self._queue.appendleft(item)
        self._enqueued.add(item.key)
        logger.debug("Prioritized %s", path)

        if not self._paused:
            self._active = True
            self._ensure_runner(0)

    def pause(self) -> None:
        """Stop issuing new enumerations and fetches.

        Fetches already in flight are allowed to complete.
        """
        if self._paused:
            return
        logger.info("Pausing background caching")
        self._paused = True

    def resume(self) -> None:
        """Resume a paused traversal from its exact remaining queue."""
        if not self._paused:
            return
        self._paused = False
        if self._active or self._queue or self._deferred_files:
            logger.info("Resuming background caching (%d queued)", len(self._queue))
            self._active = True
            self._ensure_runner(0)

    async def join(self) -> None:
        """Wait for the current runner to finish (drained or paused)."""
        while self._runner is not None and not self._runner.done():
            await asyncio.wait({self._runner})

    def reset(self) -> None:
        """Drop all traversal state and stop the runner."""
        if self._runner is not None and not self._runner.done():
            self._runner.cancel()
        self._runner = None
        self._queue.clear()
        self._enqueued.clear()
        self._visited.clear()
        self._deferred_files.clear()
        self._prefetches.clear()
        self._active = False
        self._paused = False
        self.errors = 0
        self.last_error = None

    async def close(self) -> None:
        """Cancel the runner and wait for it to exit."""
        runner = self._runner
        self.reset()
        if runner is not None:
            try:
                await runner
            except asyncio.CancelledError:
                pass

    # ------------------------------------------------------------------
    # Runner

    def _enqueue(self, path: str, level: int) -> None:
        item = QueueItem(path, level)
        if item.key not in self._enqueued:
            self._queue.append(item)
            self._enqueued.add(item.key)

    def _ensure_runner(self, delay: float) -> None:
        if self._runner is not None and not self._runner.done():
            return
        self._runner = asyncio.create_task(self._run(delay))

    async def _run(self, delay: float) -> None:
        await asyncio.sleep(delay)

        while not self._paused:
            if not self._queue and not self._deferred_files:
                await self._drain_prefetches()
                if self._queue or self._deferred_files:
                    continue
                self._active = False
                logger.info("Background caching completed")
                return

            try:
                await self._issue_deferred_files()
                if self._queue and not self._paused:
                    await self._process_next_level()
            except Exception as e:
                self._record_level_error(e)
                await asyncio.sleep(self.config.error_backoff)
                continue

            if self._queue:
                await asyncio.sleep(self.config.level_delay)

    async def _drain_prefetches(self) -> None:
        while self._prefetches:
            await asyncio.wait(set(self._prefetches))

    def _take_level_batch(self) -> Tuple[int, Deque[QueueItem]]:
        min_level = min(item.level for item in self._queue)
        batch = deque(item for item in self._queue if item.level == min_level)
        self._queue = deque(item for item in self._queue if item.level != min_level)
        return min_level, batch

    async def _process_next_level(self) -> None:
        """Enumerate every queued directory at the lowest queued level."""
        level, batch = self._take_level_batch()
        logger.info("Caching level %d - %d directories", level, len(batch))

        while batch:
            if self._paused:
                # Put the untouched remainder back in its original order
                self._queue.extendleft(reversed(batch))
                return

            item = batch.popleft()
            if item.path in self._visited:
                continue
            self._visited.add(item.path)

            try:
                await self._cache_directory_contents(item.path, item.level)
            except Exception as e:
                self._queue.extendleft(reversed(batch))
                raise TraversalError(str(e), level=item.level, path=item.path) from e

            if batch:
                await asyncio.sleep(self.config.idle_pause)

    async def _cache_directory_contents(self, path: str, level: int) -> None:
        """List one directory, queue its subdirectories, prefetch its text files."""
        try:
            entries = await self._directory.list_directory(path)
        except Exception as e:
            entries = await self.error_policy.handle(e, "list_directory", path) or []
            self.errors += 1

        text_files = []
        for entry in entries:
            if entry.is_directory:
                self._enqueue(entry.path, level + 1)
            elif is_text_file(entry.name, self.config.text_extensions):
                text_files.append(entry.path)

        logger.debug("Listed %s: %d entries, %d text files", path, len(entries), len(text_files))
        self._deferred_files.extend(text_files)
        await self._issue_deferred_files()

    async def _issue_deferred_files(self) -> None:
        while self._deferred_files:
            if self._paused:
                return
            await asyncio.sleep(self.config.idle_fetch_timeout)
            if self._paused:
                return
            task = self._cache.prefetch(self._deferred_files.popleft())
            if task is not None:
                self._prefetches.add(task)
                task.add_done_callback(self._prefetches.discard)

    def _record_level_error(self, error: Exception) -> None:
        self.errors += 1
        if isinstance(error, TraversalError):
            self.last_error = error
        else:
            self.last_error = TraversalError(str(error))
        logger.exception("Error in background caching, backing off %.1fs", self.config.error_backoff)

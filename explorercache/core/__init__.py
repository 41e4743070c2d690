"""Core abstractions for the content cache and prefetcher.

All components use async/await; remote calls are the only suspension
points besides the scheduler's own pacing sleeps.
"""

from .entry import FileEntry
from .directory import RemoteDirectory
from .cache import ContentCache
from .scheduler import QueueItem, TraversalScheduler

__all__ = [
    # Records
    'FileEntry',
    'QueueItem',
    # Directory
    'RemoteDirectory',
    # Engine
    'ContentCache',
    'TraversalScheduler',
]

"""explorer-cache - background content cache and prefetcher for file explorers.

Keeps the text content of remote files in memory, deduplicates concurrent
fetches, and walks the remote tree breadth-first in the background so that
opening a file is usually instant.

Typical use:
━━━━━━━━━━━━━━━━━━━━━━━━━━
    from explorercache import init_cache_manager
    from explorercache.adapters import HttpRemoteDirectory

    manager = init_cache_manager(HttpRemoteDirectory("http://localhost:3000/api"))
    manager.start_background_caching('/')
    content = await manager.get_content_with_cache('/readme.md')
━━━━━━━━━━━━━━━━━━━━━━━━━━
"""

__version__ = "0.1.0"

from .config import CacheConfig, HttpConfig, SchedulerRunState
from .core import ContentCache, FileEntry, QueueItem, RemoteDirectory, TraversalScheduler
from .errors import (
    AccessDeniedError,
    BadRequestError,
    BinaryContentError,
    ConfigurationError,
    ExplorerCacheError,
    NetworkError,
    RemoteNotFoundError,
    TraversalError,
)
from .error_policies import (
    CollectErrorsPolicy,
    ContinueOnErrorsPolicy,
    ErrorPolicy,
    FailFastPolicy,
)
from .file_types import DEFAULT_TEXT_EXTENSIONS, is_text_file
from .lifecycle import HIDDEN, VISIBLE, LifecycleController
from .manager import CacheManager, init_cache_manager
from .stats import CacheStats, format_status

__all__ = [
    "__version__",
    # Main API
    "CacheManager",
    "init_cache_manager",
    "CacheStats",
    "format_status",
    # Components
    "ContentCache",
    "TraversalScheduler",
    "LifecycleController",
    "QueueItem",
    "VISIBLE",
    "HIDDEN",
    # Remote directory
    "RemoteDirectory",
    "FileEntry",
    # Configuration
    "CacheConfig",
    "HttpConfig",
    "SchedulerRunState",
    "DEFAULT_TEXT_EXTENSIONS",
    "is_text_file",
    # Errors
    "ExplorerCacheError",
    "ConfigurationError",
    "NetworkError",
    "BadRequestError",
    "AccessDeniedError",
    "RemoteNotFoundError",
    "BinaryContentError",
    "TraversalError",
    # Error policies
    "ErrorPolicy",
    "FailFastPolicy",
    "ContinueOnErrorsPolicy",
    "CollectErrorsPolicy",
]

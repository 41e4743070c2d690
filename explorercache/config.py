"""Configuration system for explorer-cache.

This module defines how users tune the background prefetcher: the pacing
delays between units of work, which files count as text, and how listing
errors are handled. Remote endpoints are configured separately through
HttpConfig.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import AbstractSet, Dict, List, Optional, Any

from .file_types import DEFAULT_TEXT_EXTENSIONS


class SchedulerRunState(Enum):
    """Run state of the background traversal.

    IDLE before the first start and after the queue drains, ACTIVE while
    levels are being processed, PAUSED while suspended with queue preserved.
    """
    IDLE = "idle"
    ACTIVE = "active"
    PAUSED = "paused"


@dataclass
class CacheConfig:
    """Pacing and selection settings for the background prefetcher.

    All delays are in seconds. The defaults keep interactive work
    responsive: nothing happens for a second after start, directories are
    spaced out, and a failing level backs off for a while.
    """

    startup_delay: float = 1.0        # Grace period before the first level
    idle_pause: float = 0.2           # Yield between directories in a batch
    level_delay: float = 0.5          # Pause between level batches
    error_backoff: float = 5.0        # Back-off after an unexpected level failure
    idle_fetch_timeout: float = 0.0   # Yield before each proactive file fetch

    text_extensions: AbstractSet[str] = field(default_factory=lambda: DEFAULT_TEXT_EXTENSIONS)

    # Listing error handling (None = ContinueOnErrorsPolicy)
    error_policy: Optional[Any] = None

    @classmethod
    def immediate(cls, **overrides) -> 'CacheConfig':
        """Create a config with every delay set to zero.

        Handy for scripts and tests where pacing only slows things down.

        Returns:
            CacheConfig without any waits
        """
        values = dict(
            startup_delay=0.0,
            idle_pause=0.0,
            level_delay=0.0,
            error_backoff=0.0,
            idle_fetch_timeout=0.0,
        )
        values.update(overrides)
        return cls(**values)

    def validate(self) -> List[str]:
        """Validate configuration for consistency.

        Returns:
            List of validation errors (empty if valid)
        """
        errors = []

        for name in ('startup_delay', 'idle_pause', 'level_delay',
                     'error_backoff', 'idle_fetch_timeout'):
            if getattr(self, name) < 0:
                errors.append(f"{name} cannot be negative")

        if not self.text_extensions:
            errors.append("text_extensions cannot be empty")
        elif any(ext.startswith('.') or ext != ext.lower() for ext in self.text_extensions):
            errors.append("text_extensions must be lower-case and without a leading dot")

        return errors


@dataclass
class HttpConfig:
    """Connection settings for the HTTP remote directory."""

    base_url: str = "http://localhost:3000/api"
    timeout: float = 10.0
    headers: Dict[str, str] = field(default_factory=dict)

    def validate(self) -> List[str]:
        """Validate configuration for consistency.

        Returns:
            List of validation errors (empty if valid)
        """
        errors = []
        if not self.base_url:
            errors.append("base_url is required")
        if self.timeout <= 0:
            errors.append("timeout must be positive")
        return errors

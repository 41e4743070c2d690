"""Read-only statistics snapshot for status displays."""

from dataclasses import asdict, dataclass
from typing import Any, Dict


@dataclass(frozen=True)
class CacheStats:
    """Point-in-time aggregate of cache and scheduler counters.

    Derived data only; building one never changes scheduling.
    """

    hits: int
    misses: int
    total_fetched: int
    total_requested: int
    errors: int
    cache_size: int
    pending_count: int
    visited_count: int
    queue_size: int
    active: bool
    paused: bool

    @property
    def hit_rate(self) -> float:
        """Share of cache lookups that were hits (0.0 with no lookups)."""
        lookups = self.hits + self.misses
        return self.hits / lookups if lookups else 0.0

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data['hit_rate'] = self.hit_rate
        return data


def format_status(stats: CacheStats) -> str:
    """Render a one-line status indicator.

    Example:
        ``Cache: 2/3 files | 67% hit | Active (4 queued)``
    """
    text = f"Cache: {stats.cache_size}/{stats.total_requested} files"

    if stats.hits + stats.misses > 0:
        text += f" | {round(stats.hit_rate * 100)}% hit"

    if stats.paused:
        text += f" | Paused ({stats.queue_size} queued)"
    elif stats.active:
        text += f" | Active ({stats.queue_size} queued)"
    else:
        text += " | Done"

    if stats.errors:
        text += f" | {stats.errors} errors"

    return text

"""Remote directory abstraction.

Defines the minimal read-only interface the cache and scheduler consume.
Every call is an independent round trip with unbounded latency that may
fail; implementations raise NetworkError subclasses on failure.
"""

from abc import ABC, abstractmethod
from typing import List

from ..errors import RemoteNotFoundError
from .entry import FileEntry


class RemoteDirectory(ABC):
    """Abstract base class for remote directory sources.

    Adapters bridge between the cache engine and a concrete backing store
    (an HTTP file server, a local folder, an in-memory tree for tests).
    """

    @abstractmethod
    async def list_directory(self, path: str) -> List[FileEntry]:
        """List the immediate children of a directory.

        Args:
            path: POSIX absolute directory path

        Returns:
            Entries for every file and subdirectory
        """
        pass

    @abstractmethod
    async def read_text_content(self, path: str) -> str:
        """Read the text content of a file.

        Args:
            path: POSIX absolute file path

        Returns:
            Decoded text content
        """
        pass

    # Optional methods with default implementations

    async def get_details(self, path: str) -> FileEntry:
        """Get the entry for a single path.

        Default implementation lists the parent and picks the match.
        """
        parent, _, name = path.rstrip('/').rpartition('/')
        for entry in await self.list_directory(parent or '/'):
            if entry.name == name:
                return entry
        raise RemoteNotFoundError("File not found", status_code=404, path=path)

    async def close(self):
        """Clean up resources (connections, executors)."""
        pass

    async def __aenter__(self):
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()

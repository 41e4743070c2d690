"""Exception taxonomy for explorer-cache.

Remote failures are ``NetworkError`` subclasses and always reach the caller
that asked for the content. ``TraversalError`` records an unexpected failure
inside the background scheduler; it is logged and counted, never raised to
user code.
"""

from typing import Optional


class ExplorerCacheError(Exception):
    """Base class for all errors raised by this library."""


class ConfigurationError(ExplorerCacheError):
    """Raised when a configuration object fails validation."""


class NetworkError(ExplorerCacheError):
    """A remote directory call failed (transport error or non-OK status)."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        path: Optional[str] = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.path = path

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}({str(self)!r}, "
            f"status_code={self.status_code!r}, path={self.path!r})"
        )


class BadRequestError(NetworkError):
    """The path exists but is the wrong kind (e.g. listing a file)."""


class AccessDeniedError(NetworkError):
    """The path escapes the sandboxed root."""


class RemoteNotFoundError(NetworkError):
    """The path does not exist on the remote side."""


class BinaryContentError(BadRequestError):
    """The file is not classified as text and has no text content."""


class TraversalError(ExplorerCacheError):
    """Unexpected failure while processing a traversal level."""

    def __init__(self, message: str, level: Optional[int] = None, path: Optional[str] = None):
        super().__init__(message)
        self.level = level
        self.path = path

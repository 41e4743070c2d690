"""
Error handling policies for directory listings during background traversal.

The scheduler hands every listing failure to a policy, which decides whether
the traversal carries on (and with what fallback value) or whether the error
propagates to the level boundary.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List

from .errors import NetworkError

logger = logging.getLogger(__name__)


class ErrorPolicy(ABC):
    """
    Base class for error handling policies.

    Subclasses implement different strategies for handling errors
    raised by the remote directory while the scheduler is enumerating.
    """

    @abstractmethod
    async def handle(self, error: Exception, method_name: str, path: str) -> Any:
        """
        Handle an error that occurred during a remote directory call.

        Args:
            error: The exception that was raised
            method_name: Name of the call that failed (e.g., 'list_directory')
            path: The directory or file path being processed

        Returns:
            A fallback value that lets traversal continue,
            or re-raises the exception.
        """
        pass

    @staticmethod
    def _default_for(method_name: str) -> Any:
        if method_name == 'list_directory':
            return []  # Empty listing lets the batch move on
        return None


def _record(error: Exception, method_name: str, path: str) -> Dict[str, Any]:
    return {
        'path': path,
        'method': method_name,
        'error': error,
        'error_type': type(error).__name__,
        'error_message': str(error),
    }


class FailFastPolicy(ErrorPolicy):
    """
    Policy that immediately re-raises any error.

    Inside the scheduler this means the failure is caught at the level
    boundary instead, which triggers the long back-off.
    """

    async def handle(self, error: Exception, method_name: str, path: str) -> Any:
        """Re-raise the error immediately."""
        raise error


class ContinueOnErrorsPolicy(ErrorPolicy):
    """
    Policy that logs errors and continues traversal.

    This is the scheduler's default: a directory that cannot be listed is
    treated as empty and the rest of the level proceeds.
    """

    def __init__(self, verbose: bool = True):
        """
        Initialize the policy.

        Args:
            verbose: If True, log a warning for every error
        """
        self.errors: List[Dict[str, Any]] = []
        self.skipped_paths: List[str] = []
        self.verbose = verbose

    async def handle(self, error: Exception, method_name: str, path: str) -> Any:
        """Record the error and return a sensible default."""
        self.errors.append(_record(error, method_name, path))
        self.skipped_paths.append(path)

        if self.verbose:
            logger.warning("Error in %s for '%s': %s", method_name, path, error)

        return self._default_for(method_name)

    def get_statistics(self) -> dict:
        """
        Get statistics about errors encountered.

        Returns:
            Dictionary with error counts and details
        """
        return {
            'total_errors': len(self.errors),
            'network_errors': sum(1 for e in self.errors if isinstance(e['error'], NetworkError)),
            'skipped_paths': len(self.skipped_paths),
            'errors': self.errors,
        }


class CollectErrorsPolicy(ContinueOnErrorsPolicy):
    """
    Policy that collects all errors without logging.

    Useful for presenting all failures at once at the end of a session.
    """

    def __init__(self):
        """Initialize the policy."""
        super().__init__(verbose=False)

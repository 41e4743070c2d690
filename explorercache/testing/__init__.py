"""Testing utilities for explorer-cache consumers."""

from .fixtures import InMemoryRemoteDirectory, build_wide_tree

__all__ = ['InMemoryRemoteDirectory', 'build_wide_tree']

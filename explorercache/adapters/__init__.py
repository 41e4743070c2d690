"""Remote directory adapters.

This module contains adapters that bridge concrete backing stores
(an HTTP file server, a local folder) to the RemoteDirectory interface.
"""

from .caching import CachingRemoteDirectory
from .http import HttpRemoteDirectory
from .local import LocalDirectory, guess_mime_type, is_text_mime_type

__all__ = [
    'CachingRemoteDirectory',
    'HttpRemoteDirectory',
    'LocalDirectory',
    'guess_mime_type',
    'is_text_mime_type',
]

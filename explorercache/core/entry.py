"""Directory entry record returned by remote directory listings."""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional


def _parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    # fromisoformat only accepts a trailing 'Z' from Python 3.11 on
    if value.endswith('Z'):
        value = value[:-1] + '+00:00'
    return datetime.fromisoformat(value)


@dataclass(frozen=True)
class FileEntry:
    """One file or directory inside a remote directory.

    ``path`` is a POSIX-style absolute path rooted at ``/``. ``mime_type``
    is only reported for files.
    """

    name: str
    path: str
    is_directory: bool
    size: int = 0
    modified: Optional[datetime] = None
    mime_type: Optional[str] = None

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> 'FileEntry':
        """Build an entry from the wire format of the ``/files`` endpoints.

        Args:
            data: Mapping with name, path, isDirectory, size, modified, type

        Returns:
            Parsed FileEntry
        """
        return cls(
            name=data['name'],
            path=data['path'],
            is_directory=bool(data.get('isDirectory', False)),
            size=int(data.get('size') or 0),
            modified=_parse_timestamp(data.get('modified')),
            mime_type=data.get('type'),
        )

    def to_json(self) -> Dict[str, Any]:
        """Serialize back to the wire format."""
        data: Dict[str, Any] = {
            'name': self.name,
            'path': self.path,
            'isDirectory': self.is_directory,
            'size': self.size,
            'modified': self.modified.isoformat() if self.modified else None,
        }
        if not self.is_directory and self.mime_type is not None:
            data['type'] = self.mime_type
        return data

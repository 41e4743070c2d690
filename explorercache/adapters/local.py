"""Local-disk remote directory with a sandboxed root.

Serves the same contract as the HTTP file API directly from a folder, with
the same rules: every path is resolved inside the root, escaping it is
refused, and only text-classified files have readable content. Blocking
filesystem calls run in a worker thread.
"""

import asyncio
import mimetypes
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Union

from ..core.directory import RemoteDirectory
from ..core.entry import FileEntry
from ..file_types import is_text_file
from ..errors import AccessDeniedError, BadRequestError, BinaryContentError, RemoteNotFoundError


def guess_mime_type(path: Union[str, Path]) -> str:
    """Get the MIME type for a file name, defaulting to octet-stream."""
    mime_type, _ = mimetypes.guess_type(str(path))
    if mime_type:
        return mime_type
    # mimetypes misses some source and markup extensions on older Pythons
    if is_text_file(Path(path).name):
        return 'text/plain'
    return 'application/octet-stream'


def is_text_mime_type(mime_type: str) -> bool:
    """Check whether a MIME type is served as text."""
    return (
        mime_type.startswith('text/')
        or 'javascript' in mime_type
        or 'json' in mime_type
        or 'xml' in mime_type
    )


class LocalDirectory(RemoteDirectory):
    """Read-only view of a local folder exposed as a remote directory.

    Example:
        directory = LocalDirectory("/srv/files")
        entries = await directory.list_directory("/docs")
    """

    def __init__(self, root: Union[str, Path], follow_symlinks: bool = False):
        """Initialize the local directory.

        Args:
            root: Folder that maps to ``/``
            follow_symlinks: Whether symlinked entries are listed
        """
        self.root = Path(root).resolve()
        self.follow_symlinks = follow_symlinks

    def resolve(self, path: str) -> Path:
        """Map a POSIX path rooted at ``/`` onto the sandbox.

        Raises:
            AccessDeniedError: If the path escapes the root
        """
        relative = path.lstrip('/')
        absolute = (self.root / relative).resolve()
        if absolute != self.root and self.root not in absolute.parents:
            raise AccessDeniedError("Access denied", status_code=403, path=path)
        return absolute

    def _relative_path(self, absolute: Path) -> str:
        relative = absolute.relative_to(self.root).as_posix()
        return '/' if relative == '.' else '/' + relative

    def _entry_for(self, absolute: Path, stat_result: os.stat_result, is_directory: bool) -> FileEntry:
        return FileEntry(
            name=absolute.name,
            path=self._relative_path(absolute),
            is_directory=is_directory,
            size=stat_result.st_size,
            modified=datetime.fromtimestamp(stat_result.st_mtime, tz=timezone.utc),
            mime_type=None if is_directory else guess_mime_type(absolute),
        )

    async def list_directory(self, path: str) -> List[FileEntry]:
        absolute = self.resolve(path)

        def _scan_directory_sync() -> List[FileEntry]:
            if not absolute.exists():
                raise RemoteNotFoundError("Directory not found", status_code=404, path=path)
            if not absolute.is_dir():
                raise BadRequestError("Not a directory", status_code=400, path=path)

            entries = []
            with os.scandir(absolute) as iterator:
                for entry in iterator:
                    if not self.follow_symlinks and entry.is_symlink():
                        continue
                    try:
                        stat_result = entry.stat(follow_symlinks=True)
                        is_directory = entry.is_dir(follow_symlinks=True)
                    except OSError:
                        # Broken symlinks and vanished files
                        continue
                    entries.append(self._entry_for(Path(entry.path), stat_result, is_directory))
            entries.sort(key=lambda e: e.name)
            return entries

        return await asyncio.to_thread(_scan_directory_sync)

    async def get_details(self, path: str) -> FileEntry:
        absolute = self.resolve(path)

        def _stat_sync() -> FileEntry:
            try:
                stat_result = absolute.stat()
            except FileNotFoundError:
                raise RemoteNotFoundError("File not found", status_code=404, path=path) from None
            return self._entry_for(absolute, stat_result, absolute.is_dir())

        return await asyncio.to_thread(_stat_sync)

    async def read_text_content(self, path: str) -> str:
        absolute = self.resolve(path)

        def _read_sync() -> str:
            if not absolute.exists():
                raise RemoteNotFoundError("File not found", status_code=404, path=path)
            if absolute.is_dir():
                raise BadRequestError("Cannot get content of a directory", status_code=400, path=path)
            if not is_text_mime_type(guess_mime_type(absolute)):
                raise BinaryContentError(
                    "Binary files cannot be viewed as text", status_code=400, path=path
                )
            # Undecodable bytes are replaced rather than failing the read
            return absolute.read_text(encoding='utf-8', errors='replace')

        return await asyncio.to_thread(_read_sync)

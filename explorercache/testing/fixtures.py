"""Test fixtures for explorer-cache consumers.

These fixtures provide a controllable remote directory so cache and
scheduler behaviour can be verified without a file server.
"""

import asyncio
from typing import Any, Dict, List, Optional, Union

from ..core.directory import RemoteDirectory
from ..core.entry import FileEntry
from ..errors import BadRequestError, BinaryContentError, NetworkError, RemoteNotFoundError
from ..file_types import is_text_file


def _join(parent: str, name: str) -> str:
    return '/' + name if parent == '/' else parent + '/' + name


class InMemoryRemoteDirectory(RemoteDirectory):
    """Remote directory over a nested dict, with call recording.

    Directories are dicts, files are strings. Individual paths can be made
    to fail, and listings or reads can be held on an asyncio.Event until
    the test releases them.

    Example:
        directory = InMemoryRemoteDirectory({
            'readme.md': 'hello',
            'docs': {'notes.txt': 'notes'},
        })
        await directory.list_directory('/')
        assert directory.list_calls == ['/']
    """

    def __init__(self, tree: Optional[Dict[str, Any]] = None, delay: float = 0.0):
        """Initialize with an optional tree.

        Args:
            tree: Nested mapping of names to dicts (directories) or str (files)
            delay: Simulated latency added to every call, in seconds
        """
        self.delay = delay
        self._files: Dict[str, str] = {}
        self._dirs: Dict[str, List[str]] = {'/': []}
        self._failures: Dict[str, Exception] = {}
        self._gates: Dict[str, asyncio.Event] = {}

        self.list_calls: List[str] = []
        self.read_calls: List[str] = []
        self.closed = False

        if tree:
            self._load('/', tree)

    def _load(self, parent: str, tree: Dict[str, Any]) -> None:
        for name, value in tree.items():
            path = _join(parent, name)
            if isinstance(value, dict):
                self.add_dir(path)
                self._load(path, value)
            else:
                self.add_file(path, value)

    def _register(self, path: str) -> None:
        parent, _, _ = path.rpartition('/')
        parent = parent or '/'
        if parent not in self._dirs:
            self.add_dir(parent)
        if path not in self._dirs[parent]:
            self._dirs[parent].append(path)

    def add_dir(self, path: str) -> None:
        """Add an (empty) directory, creating parents as needed."""
        if path in self._dirs:
            return
        self._dirs[path] = []
        self._register(path)

    def add_file(self, path: str, content: str = '') -> None:
        """Add or replace a file, creating parents as needed."""
        if path not in self._files:
            self._register(path)
        self._files[path] = content

    def fail(self, path: str, error: Optional[Exception] = None) -> None:
        """Make every call for a path raise an error (NetworkError by default)."""
        self._failures[path] = error or NetworkError("Simulated failure", status_code=500, path=path)

    def recover(self, path: str) -> None:
        """Stop failing calls for a path."""
        self._failures.pop(path, None)

    def hold(self, path: str) -> asyncio.Event:
        """Block calls for a path until the returned event is set."""
        gate = self._gates.get(path)
        if gate is None:
            gate = self._gates[path] = asyncio.Event()
        return gate

    def release(self, path: Optional[str] = None) -> None:
        """Release one held path, or all of them."""
        paths = [path] if path is not None else list(self._gates)
        for p in paths:
            gate = self._gates.pop(p, None)
            if gate is not None:
                gate.set()

    def reads_of(self, path: str) -> int:
        return self.read_calls.count(path)

    def lists_of(self, path: str) -> int:
        return self.list_calls.count(path)

    async def _simulate(self, path: str) -> None:
        if self.delay:
            await asyncio.sleep(self.delay)
        gate = self._gates.get(path)
        if gate is not None:
            await gate.wait()
        error = self._failures.get(path)
        if error is not None:
            raise error

    def _entry(self, path: str) -> FileEntry:
        name = path.rpartition('/')[2]
        if path in self._dirs:
            return FileEntry(name=name, path=path, is_directory=True)
        content = self._files[path]
        return FileEntry(
            name=name,
            path=path,
            is_directory=False,
            size=len(content.encode('utf-8')),
            mime_type='text/plain' if is_text_file(name) else 'application/octet-stream',
        )

    async def list_directory(self, path: str) -> List[FileEntry]:
        self.list_calls.append(path)
        await self._simulate(path)
        if path in self._files:
            raise BadRequestError("Not a directory", status_code=400, path=path)
        if path not in self._dirs:
            raise RemoteNotFoundError("Directory not found", status_code=404, path=path)
        return [self._entry(child) for child in self._dirs[path]]

    async def read_text_content(self, path: str) -> str:
        self.read_calls.append(path)
        await self._simulate(path)
        if path in self._dirs:
            raise BadRequestError("Cannot get content of a directory", status_code=400, path=path)
        if path not in self._files:
            raise RemoteNotFoundError("File not found", status_code=404, path=path)
        if not is_text_file(path):
            raise BinaryContentError("Binary files cannot be viewed as text", status_code=400, path=path)
        return self._files[path]

    async def get_details(self, path: str) -> FileEntry:
        await self._simulate(path)
        if path not in self._dirs and path not in self._files:
            raise RemoteNotFoundError("File not found", status_code=404, path=path)
        return self._entry(path)

    async def close(self):
        self.closed = True
        self.release()


TreeLayout = Dict[str, Union[str, Dict[str, Any]]]


def build_wide_tree(depth: int, breadth: int, files_per_dir: int = 1) -> TreeLayout:
    """Build a uniform tree layout for traversal tests.

    Each directory holds ``breadth`` subdirectories named ``d0..`` and
    ``files_per_dir`` text files named ``f0.txt..``.
    """
    def level(remaining: int) -> TreeLayout:
        node: TreeLayout = {f"f{i}.txt": f"file {i}" for i in range(files_per_dir)}
        if remaining > 0:
            for i in range(breadth):
                node[f"d{i}"] = level(remaining - 1)
        return node

    return level(depth)

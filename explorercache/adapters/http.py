"""HTTP remote directory backed by the file explorer's ``/files`` API.

Endpoints consumed:
    GET {base_url}/files?path=<p>          -> JSON array of entries
    GET {base_url}/files/details?path=<p>  -> single entry
    GET {base_url}/files/content?path=<p>  -> {"content": "..."}
"""

import json
import logging
from dataclasses import replace
from typing import Any, Dict, List, Optional

import httpx

from ..config import HttpConfig
from ..core.directory import RemoteDirectory
from ..core.entry import FileEntry
from ..errors import (
    AccessDeniedError,
    BadRequestError,
    ConfigurationError,
    NetworkError,
    RemoteNotFoundError,
)

logger = logging.getLogger(__name__)

_STATUS_ERRORS = {
    400: BadRequestError,
    403: AccessDeniedError,
    404: RemoteNotFoundError,
}


class HttpRemoteDirectory(RemoteDirectory):
    """Remote directory reached over HTTP with an httpx.AsyncClient.

    Each call is one request; no retries are attempted here. Pass an
    existing client to share a connection pool (or a MockTransport in
    tests); otherwise one is created lazily and closed by close().
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        *,
        timeout: Optional[float] = None,
        config: Optional[HttpConfig] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        """Initialize the HTTP directory.

        Args:
            base_url: API root, e.g. ``http://localhost:3000/api``
            timeout: Per-request timeout in seconds
            config: Full connection settings (explicit arguments win)
            client: Pre-built client; not closed by close()

        Raises:
            ConfigurationError: If the settings do not validate
        """
        self.config = config or HttpConfig()
        if base_url is not None:
            self.config = replace(self.config, base_url=base_url)
        if timeout is not None:
            self.config = replace(self.config, timeout=timeout)
        problems = self.config.validate()
        if problems:
            raise ConfigurationError("; ".join(problems))

        self.base_url = self.config.base_url.rstrip('/')
        self._client = client
        self._owns_client = client is None
        self.request_count = 0

    @property
    def client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None:
            headers = {"Accept": "application/json"}
            headers.update(self.config.headers)
            self._client = httpx.AsyncClient(
                headers=headers,
                timeout=httpx.Timeout(self.config.timeout),
                follow_redirects=True,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client if this directory created it."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
        self._client = None

    async def list_directory(self, path: str) -> List[FileEntry]:
        data = await self._get_json("/files", path)
        if not isinstance(data, list):
            raise NetworkError("Invalid listing format from API", path=path)
        return [FileEntry.from_json(item) for item in data]

    async def get_details(self, path: str) -> FileEntry:
        data = await self._get_json("/files/details", path)
        return FileEntry.from_json(data)

    async def read_text_content(self, path: str) -> str:
        data = await self._get_json("/files/content", path)
        try:
            return data["content"]
        except (KeyError, TypeError) as err:
            raise NetworkError("Invalid content format from API", path=path) from err

    async def _get_json(self, endpoint: str, path: str) -> Any:
        url = f"{self.base_url}{endpoint}"
        self.request_count += 1
        try:
            response = await self.client.get(url, params={"path": path})
        except httpx.TimeoutException as err:
            raise NetworkError(f"Request timed out: {endpoint}", path=path) from err
        except httpx.HTTPError as err:
            raise NetworkError(f"API request failed: {err}", path=path) from err

        return self._handle_response(response, path)

    def _handle_response(self, response: httpx.Response, path: str) -> Any:
        """Map HTTP errors onto the exception taxonomy and decode JSON."""
        if response.status_code >= 400:
            message = self._error_message(response)
            error_cls = _STATUS_ERRORS.get(response.status_code, NetworkError)
            logger.debug("GET %s -> %d %s", response.request.url, response.status_code, message)
            raise error_cls(message, status_code=response.status_code, path=path)

        try:
            return response.json()
        except json.JSONDecodeError as err:
            raise NetworkError("Invalid response format from API", path=path) from err

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        fallback = f"API error: {response.status_code} {response.reason_phrase}"
        try:
            body: Dict[str, Any] = response.json()
        except json.JSONDecodeError:
            return fallback
        if isinstance(body, dict) and body.get("error"):
            return str(body["error"])
        return fallback

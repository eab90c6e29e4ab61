"""Remote node source backed by the n8n repository on GitHub.

Walks ``packages/nodes-base/nodes``: one request for the directory
listing, then per node directory one request for its file listing and one
for the ``*.node.ts`` source. Every request goes through the rate limiter.
"""
from abc import ABC, abstractmethod
from typing import Any, Optional

import httpx
import structlog

from node_atlas.catalog.errors import RefreshUnavailableError
from node_atlas.config import get_settings
from node_atlas.ingest.parser import RawNodeRecord
from node_atlas.ingest.throttle import RateLimiter

logger = structlog.get_logger()

USER_AGENT = "node-atlas"

# A single directory failing with any of these is skipped
_DIRECTORY_ERRORS = (httpx.HTTPError, ValueError, TypeError, KeyError, AttributeError)


class NodeSource(ABC):
    """Abstract source of raw node definitions."""

    @abstractmethod
    async def latest_revision(self) -> str:
        """Get a marker that changes whenever the source content changes."""
        pass

    @abstractmethod
    async def fetch_records(self) -> list[RawNodeRecord]:
        """Fetch every node definition.

        Raises:
            RefreshUnavailableError: the source cannot be listed at all.
        """
        pass


def _status_code(error: Exception) -> Optional[int]:
    if isinstance(error, httpx.HTTPStatusError):
        return error.response.status_code
    return None


class GitHubNodeSource(NodeSource):
    """Fetches node definitions through the GitHub contents API."""

    def __init__(
        self,
        api_base: Optional[str] = None,
        nodes_path: Optional[str] = None,
        branch: Optional[str] = None,
        token: Optional[str] = None,
        rate_limiter: Optional[RateLimiter] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        settings = get_settings()
        self.api_base = (api_base or settings.github_api_base).rstrip("/")
        self.nodes_path = (nodes_path or settings.github_nodes_path).strip("/")
        self.branch = branch or settings.github_branch
        self.token = token if token is not None else settings.github_token
        self.rate_limiter = rate_limiter or RateLimiter(settings.refresh_min_interval)
        self.timeout = timeout or settings.refresh_timeout
        self._transport = transport

    def _headers(self, raw: bool = False) -> dict[str, str]:
        headers = {"User-Agent": USER_AGENT}
        if not raw:
            headers["Accept"] = "application/vnd.github.v3+json"
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=self._transport, timeout=self.timeout)

    async def _get(self, client: httpx.AsyncClient, url: str, raw: bool = False) -> httpx.Response:
        await self.rate_limiter.wait()
        response = await client.get(url, headers=self._headers(raw=raw))
        logger.debug("github_request", url=url, status_code=response.status_code)
        response.raise_for_status()
        return response

    async def latest_revision(self) -> str:
        url = f"{self.api_base}/commits/{self.branch}"
        async with self._client() as client:
            try:
                response = await self._get(client, url)
                return response.json()["sha"]
            except (httpx.HTTPError, ValueError, KeyError, TypeError) as e:
                logger.error("github_revision_failed", branch=self.branch, error=str(e))
                raise RefreshUnavailableError(
                    f"Unable to fetch latest revision of {self.branch}: {e}",
                    phase="revision",
                    status_code=_status_code(e),
                ) from e

    async def fetch_records(self) -> list[RawNodeRecord]:
        url = f"{self.api_base}/contents/{self.nodes_path}"
        async with self._client() as client:
            try:
                response = await self._get(client, f"{url}?ref={self.branch}")
                listing = response.json()
                if not isinstance(listing, list):
                    raise ValueError(f"expected a directory listing, got {type(listing).__name__}")
            except (httpx.HTTPError, ValueError) as e:
                logger.error("github_listing_failed", path=self.nodes_path, error=str(e))
                raise RefreshUnavailableError(
                    f"Unable to list node directories: {e}",
                    phase="list",
                    status_code=_status_code(e),
                ) from e

            directories = [item for item in listing if isinstance(item, dict) and item.get("type") == "dir"]
            logger.info("github_node_directories", count=len(directories))

            records = []
            for directory in directories:
                try:
                    record = await self._fetch_directory(client, directory)
                except _DIRECTORY_ERRORS as e:
                    logger.warning(
                        "node_directory_fetch_failed",
                        directory=directory.get("name"),
                        error=str(e),
                    )
                    continue
                if record is not None:
                    records.append(record)

        logger.info("github_records_fetched", count=len(records))
        return records

    async def _fetch_directory(self, client: httpx.AsyncClient, directory: dict[str, Any]) -> Optional[RawNodeRecord]:
        name = directory["name"]
        response = await self._get(client, f"{self.api_base}/contents/{directory['path']}?ref={self.branch}")
        files = response.json()

        node_file = self._pick_node_file(name, files)
        if node_file is None:
            logger.warning("node_file_missing", directory=name)
            return None

        source = await self._get(client, node_file["download_url"], raw=True)
        return RawNodeRecord(
            directory=name,
            file_name=node_file["name"],
            content=source.text,
            source_url=directory.get("html_url"),
        )

    @staticmethod
    def _pick_node_file(directory: str, files: list[dict[str, Any]]) -> Optional[dict[str, Any]]:
        candidates = [
            f for f in files
            if f.get("type") == "file"
            and f.get("name", "").endswith(".node.ts")
            and ".test." not in f.get("name", "")
        ]
        for candidate in candidates:
            if candidate["name"] == f"{directory}.node.ts":
                return candidate
        return candidates[0] if candidates else None

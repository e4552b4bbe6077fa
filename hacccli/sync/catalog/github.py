"""GitHub REST API implementation of the release catalog."""

import asyncio
from collections.abc import Callable
from datetime import datetime
from pathlib import Path
from typing import Any, TypeVar
from urllib.parse import quote, unquote, urlparse

from aiohttp import ClientError, ClientResponse, ClientSession, ClientTimeout

from hacccli import __version__
from hacccli.core.exceptions.errors import RemoteAPIError
from hacccli.core.logger.logger import get_logger
from hacccli.models.release import Release, ReleaseAsset
from hacccli.sync.catalog.base import ReleaseCatalog
from hacccli.sync.semver import parse_version

logger = get_logger(__name__)

CHUNK_SIZE = 64 * 1024

T = TypeVar("T")


def sort_latest_first(releases: list[Release]) -> list[Release]:
    """Order releases by descending semantic version.

    Releases whose tag is not a semantic version keep their relative
    order and are placed after all versioned releases.

    Args:
        releases: Releases in API order.

    Returns:
        New list, latest first.
    """
    versioned = [r for r in releases if parse_version(r.tag_name) is not None]
    unversioned = [r for r in releases if parse_version(r.tag_name) is None]
    versioned.sort(key=lambda r: parse_version(r.tag_name), reverse=True)
    return versioned + unversioned


def parse_release(data: dict[str, Any]) -> Release:
    """Build a Release from a GitHub API release object."""
    created_at = data.get("created_at")
    return Release(
        tag_name=data["tag_name"],
        assets=tuple(
            ReleaseAsset(name=a["name"], download_url=a["browser_download_url"])
            for a in data.get("assets") or []
        ),
        created_at=datetime.fromisoformat(created_at.replace("Z", "+00:00")) if created_at else None,
        prerelease=bool(data.get("prerelease", False)),
    )


def filename_from_url(url: str) -> str:
    """Return the last path segment of a url."""
    name = unquote(urlparse(url).path.rstrip("/").rsplit("/", 1)[-1])
    return name or "download"


def is_rate_limited(status: int, headers: Any) -> bool:
    """Check whether an error response was caused by rate limiting."""
    if status == 429:
        return True
    return status == 403 and headers.get("X-RateLimit-Remaining") == "0"


class GitHubCatalog(ReleaseCatalog):
    """Release catalog backed by the GitHub REST API.

    API Documentation: https://docs.github.com/en/rest/releases
    """

    def __init__(
        self,
        token: str | None = None,
        api_url: str = "https://api.github.com",
        timeout: float = 60.0,
        per_page: int = 100,
    ) -> None:
        """Initialize the GitHub catalog.

        Args:
            token: GitHub Personal Access Token (optional but recommended).
            api_url: Base URL for API requests.
            timeout: Request timeout in seconds.
            per_page: Number of releases requested per listing.
        """
        self.token = token
        self.api_url = api_url.rstrip("/")
        self.timeout = ClientTimeout(total=timeout)
        self.per_page = per_page
        self._session: ClientSession | None = None

    async def _ensure_session(self) -> ClientSession:
        """Ensure aiohttp session exists.

        Returns:
            ClientSession instance.
        """
        if self._session is None or self._session.closed:
            self._session = ClientSession(
                timeout=self.timeout,
                headers={"User-Agent": f"hacccli/{__version__}"},
            )
        return self._session

    async def close(self) -> None:
        """Close the HTTP session."""
        if self._session and not self._session.closed:
            await self._session.close()
        self._session = None

    def _get_headers(self, accept: str = "application/vnd.github+json") -> dict[str, str]:
        """Get request headers."""
        headers = {
            "Accept": accept,
            "X-GitHub-Api-Version": "2022-11-28",
        }
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def _repo_url(self, owner: str, repo: str, *parts: str) -> str:
        path = "/".join(quote(p, safe="") for p in parts)
        base = f"{self.api_url}/repos/{quote(owner, safe='')}/{quote(repo, safe='')}"
        return f"{base}/{path}" if path else base

    async def _raise_for_status(self, response: ClientResponse, url: str) -> None:
        """Translate HTTP errors into RemoteAPIError."""
        if response.status < 400:
            return

        body = await response.text()
        rate_limited = is_rate_limited(response.status, response.headers)
        logger.error(f"HTTP {response.status} for {url}: {body[:500]}")

        if rate_limited:
            message = "GitHub API rate limit exceeded, configure a personal access token"
        else:
            message = f"GitHub API request failed: HTTP {response.status} {response.reason}"
        raise RemoteAPIError(message, status=response.status, url=url, rate_limited=rate_limited)

    async def _get_json(
        self,
        url: str,
        parse: Callable[[Any], T],
        params: dict[str, Any] | None = None,
    ) -> T:
        """GET a JSON document and convert it with parse.

        Raises:
            RemoteAPIError: On transport errors, HTTP errors or a payload
                that is not the expected JSON shape.
        """
        session = await self._ensure_session()
        logger.debug(f"Request: GET {url}")

        try:
            async with session.get(url, params=params, headers=self._get_headers()) as response:
                await self._raise_for_status(response, url)
                data = await response.json()
        except (ClientError, asyncio.TimeoutError) as e:
            raise RemoteAPIError(f"GitHub API request failed: {e}", url=url) from e
        except ValueError as e:
            raise RemoteAPIError(f"GitHub API returned malformed JSON: {e}", url=url) from e

        try:
            return parse(data)
        except (KeyError, TypeError, ValueError) as e:
            raise RemoteAPIError(f"Unexpected GitHub API response: {e!r}", url=url) from e

    async def get_branch_head(self, owner: str, repo: str, branch: str) -> str:
        return await self._get_json(
            self._repo_url(owner, repo, "branches", branch),
            lambda data: str(data["commit"]["sha"]),
        )

    async def list_releases(self, owner: str, repo: str) -> list[Release]:
        return await self._get_json(
            self._repo_url(owner, repo, "releases"),
            lambda data: sort_latest_first([parse_release(r) for r in data]),
            params={"per_page": self.per_page},
        )

    async def get_latest_release(self, owner: str, repo: str) -> Release:
        return await self._get_json(self._repo_url(owner, repo, "releases", "latest"), parse_release)

    async def list_branches(self, owner: str, repo: str) -> list[str]:
        return await self._get_json(
            self._repo_url(owner, repo, "branches"),
            lambda data: [str(b["name"]) for b in data],
            params={"per_page": 100},
        )

    async def get_file_text(self, owner: str, repo: str, path: str) -> str | None:
        session = await self._ensure_session()
        url = self._repo_url(owner, repo, "contents", path)

        try:
            async with session.get(
                url, headers=self._get_headers("application/vnd.github.raw")
            ) as response:
                if response.status == 404:
                    return None
                await self._raise_for_status(response, url)
                return await response.text()
        except (ClientError, asyncio.TimeoutError) as e:
            raise RemoteAPIError(f"GitHub API request failed: {e}", url=url) from e

    async def download_ref_archive(self, owner: str, repo: str, ref: str) -> bytes:
        session = await self._ensure_session()
        url = self._repo_url(owner, repo, "zipball", ref)
        logger.info(f"Downloading archive of {owner}/{repo}@{ref}")

        try:
            async with session.get(url, headers=self._get_headers()) as response:
                await self._raise_for_status(response, url)
                return await response.read()
        except (ClientError, asyncio.TimeoutError) as e:
            raise RemoteAPIError(f"Archive download failed: {e}", url=url) from e

    async def download_asset(self, url: str, directory: Path) -> None:
        session = await self._ensure_session()
        logger.info(f"Downloading {url}")

        headers = {"Accept": "application/octet-stream"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"

        target: Path | None = None
        try:
            async with session.get(url, headers=headers) as response:
                await self._raise_for_status(response, url)

                disposition = response.content_disposition
                filename = disposition.filename if disposition and disposition.filename else None
                target = directory / Path(filename or filename_from_url(url)).name

                f = await asyncio.to_thread(open, target, "wb")
                try:
                    async for chunk in response.content.iter_chunked(CHUNK_SIZE):
                        await asyncio.to_thread(f.write, chunk)
                finally:
                    await asyncio.to_thread(f.close)
        except (ClientError, asyncio.TimeoutError) as e:
            if target is not None:
                target.unlink(missing_ok=True)
            raise RemoteAPIError(f"Download failed: {e}", url=url) from e

        logger.debug(f"Downloaded {url} to {target}")

"""Release catalog capability consumed by the sync core."""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

from hacccli.models.release import Release


class ReleaseCatalog(ABC):
    """Read-only view of a code hosting service.

    Implementations expose branch heads, releases and downloads of
    repositories. All methods raise RemoteAPIError when the service
    rejects a request.
    """

    async def __aenter__(self) -> "ReleaseCatalog":
        """Enter async context manager."""
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Exit async context manager."""
        await self.close()

    async def close(self) -> None:
        """Release network resources."""

    @abstractmethod
    async def get_branch_head(self, owner: str, repo: str, branch: str) -> str:
        """Return the commit hash the branch currently points at."""

    @abstractmethod
    async def list_releases(self, owner: str, repo: str) -> list[Release]:
        """Return the releases of a repository, latest first."""

    @abstractmethod
    async def get_latest_release(self, owner: str, repo: str) -> Release:
        """Return the release the service marks as latest."""

    @abstractmethod
    async def download_ref_archive(self, owner: str, repo: str, ref: str) -> bytes:
        """Return the zip archive of the repository tree at a ref."""

    @abstractmethod
    async def download_asset(self, url: str, directory: Path) -> None:
        """Download a file into a directory.

        The file name is chosen by the remote side, callers have to
        discover it by comparing the directory before and after.

        Args:
            url: Asset or archive url.
            directory: Directory the file is written into.
        """

    @abstractmethod
    async def list_branches(self, owner: str, repo: str) -> list[str]:
        """Return the branch names of a repository."""

    @abstractmethod
    async def get_file_text(self, owner: str, repo: str, path: str) -> str | None:
        """Return the raw content of a file on the default branch, or None if absent."""

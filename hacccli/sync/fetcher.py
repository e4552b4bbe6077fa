"""Archive fetcher - stages release assets and branch archives locally."""

import asyncio
import os
import re
import shutil
import uuid
import zipfile
from pathlib import Path
from typing import assert_never

from hacccli.core.exceptions.errors import (
    AmbiguousDownloadResult,
    ArchiveLayoutError,
    FetchError,
    UndeterminedVersion,
)
from hacccli.core.logger.logger import get_logger
from hacccli.models.release import SourceIdentifier
from hacccli.models.sync import BranchTarget, ReleaseTarget, StagedArtifact, UpdateTarget
from hacccli.sync.catalog.base import ReleaseCatalog
from hacccli.sync.source import tag_archive_url

logger = get_logger(__name__)

SOURCE_ARCHIVE_NAME = "SourceCode.zip"
BRANCH_EXTRACT_DIR = "unzipped"

# Ref archives are wrapped in "<owner>-<repo>-<short sha>"
_WRAPPER_REF_PATTERN = re.compile(r".+-(.+)$")


def remove_path(path: Path) -> None:
    """Remove a file or a directory tree if it exists."""
    if path.is_dir() and not path.is_symlink():
        shutil.rmtree(path)
    elif path.exists() or path.is_symlink():
        path.unlink()


def detect_new_entry(before: set[str], after: set[str], directory: str = "") -> str:
    """Return the single directory entry that appeared during a download.

    Args:
        before: Directory listing taken before the download.
        after: Directory listing taken after the download.
        directory: Directory the listings were taken of, for error reporting.

    Returns:
        Name of the new entry.

    Raises:
        AmbiguousDownloadResult: If zero or several entries appeared.
    """
    new_entries = after - before
    if len(new_entries) != 1:
        raise AmbiguousDownloadResult(directory, list(new_entries))
    return next(iter(new_entries))


def flatten(directory: Path) -> str:
    """Remove the single wrapper folder hosting services put around archive contents.

    Args:
        directory: Extracted archive directory.

    Returns:
        Name of the removed wrapper folder.

    Raises:
        ArchiveLayoutError: If the directory does not hold exactly one folder.
    """
    entries = list(directory.iterdir())
    if len(entries) != 1 or not entries[0].is_dir():
        raise ArchiveLayoutError(
            "Expected a single top-level folder in the archive",
            source_path=str(directory),
            details={"entries": sorted(e.name for e in entries)},
        )

    wrapper_name = entries[0].name
    # Renamed first, a child may carry the same name as the wrapper
    wrapper = entries[0].rename(directory / f".{wrapper_name}.{uuid.uuid4().hex[:8]}")

    for child in wrapper.iterdir():
        shutil.move(str(child), str(directory / child.name))
    wrapper.rmdir()

    return wrapper_name


def extract_zip(archive: Path, flatten_wrapper: bool, destination: Path | None = None) -> Path:
    """Extract a zip archive next to it and delete the archive.

    Args:
        archive: Path of the zip file.
        flatten_wrapper: Remove the synthetic top-level folder after extraction.
        destination: Extraction directory, defaults to the archive path without suffix.

    Returns:
        Path of the extracted directory.
    """
    target = destination or archive.with_suffix("")
    remove_path(target)

    try:
        with zipfile.ZipFile(archive) as zf:
            zf.extractall(target)
    except (zipfile.BadZipFile, EOFError) as e:
        raise FetchError(f"Not a valid zip archive: {archive.name}", source_path=str(archive)) from e
    except (NotImplementedError, RuntimeError, zipfile.LargeZipFile) as e:
        # Unsupported compression method, encrypted member or ZIP64 limits
        raise FetchError(
            f"Cannot extract zip archive {archive.name}: {e}",
            source_path=str(archive),
        ) from e

    archive.unlink()
    logger.debug(f"Extracted {archive.name} to {target}")

    if flatten_wrapper:
        flatten(target)

    return target


class ArchiveFetcher:
    """Downloads artifacts of an update target into a staging directory."""

    def __init__(self, catalog: ReleaseCatalog, web_url: str = "https://github.com") -> None:
        """Initialize the fetcher.

        Args:
            catalog: Release catalog used for downloads.
            web_url: Hosting service base url for tag source archives.
        """
        self.catalog = catalog
        self.web_url = web_url

    async def download(self, url: str, destination: Path) -> Path:
        """Download a file and move it to the destination path.

        The catalog picks the file name itself, so the new file is found by
        comparing the listing of the destination's parent before and after.

        Args:
            url: Url to download.
            destination: Final path of the downloaded file.

        Returns:
            The destination path.

        Raises:
            AmbiguousDownloadResult: If not exactly one new file appeared.
        """
        remove_path(destination)
        directory = destination.parent

        before = set(os.listdir(directory))
        await self.catalog.download_asset(url, directory)
        after = set(os.listdir(directory))

        new_entry = detect_new_entry(before, after, str(directory))

        downloaded = directory / new_entry
        if downloaded != destination:
            downloaded.rename(destination)

        logger.debug(f"Downloaded {url} as {destination.name}")
        return destination

    async def fetch_release(
        self, source: SourceIdentifier, target: ReleaseTarget, staging_dir: Path
    ) -> StagedArtifact:
        """Stage the asset or tag source archive of a release.

        Args:
            source: Repository of the component.
            target: Release and asset to fetch.
            staging_dir: Directory to stage into.

        Returns:
            Staged file, or extracted directory for zip downloads.
        """
        if target.asset is not None:
            local_path = staging_dir / Path(target.asset.name).name
            url = target.asset.download_url
        else:
            local_path = staging_dir / SOURCE_ARCHIVE_NAME
            url = tag_archive_url(source, target.release.tag_name, self.web_url)

        await self.download(url, local_path)

        if local_path.suffix.lower() == ".zip":
            local_path = await asyncio.to_thread(
                extract_zip, local_path, target.uses_tag_archive
            )

        return StagedArtifact(path=local_path)

    async def fetch_branch(
        self, source: SourceIdentifier, target: BranchTarget, staging_dir: Path
    ) -> StagedArtifact:
        """Stage the archive of a branch at the resolved commit.

        Args:
            source: Repository of the component.
            target: Branch and commit to fetch.
            staging_dir: Directory to stage into.

        Returns:
            Extracted and flattened directory.

        Raises:
            UndeterminedVersion: If the archive wrapper does not name a commit.
        """
        data = await self.catalog.download_ref_archive(source.owner, source.repo, target.commit)

        archive = staging_dir / f"{target.branch.replace('/', '_')}.zip"
        remove_path(archive)
        await asyncio.to_thread(archive.write_bytes, data)

        unzipped = staging_dir / BRANCH_EXTRACT_DIR
        await asyncio.to_thread(extract_zip, archive, False, unzipped)
        wrapper_name = await asyncio.to_thread(flatten, unzipped)

        match = _WRAPPER_REF_PATTERN.match(wrapper_name)
        if not match:
            raise UndeterminedVersion(
                "Cannot determine version of branch archive",
                source_path=str(unzipped),
                details={"wrapper": wrapper_name},
            )

        archive_ref = match.group(1)
        if not target.commit.startswith(archive_ref):
            logger.warning(
                f"Archive of {source} is at {archive_ref}, expected {target.commit}; "
                f"the branch {target.branch} moved during the download"
            )

        return StagedArtifact(path=unzipped, archive_ref=archive_ref)

    async def fetch(
        self, source: SourceIdentifier, target: UpdateTarget, staging_dir: Path
    ) -> StagedArtifact:
        """Stage the artifact of any update target."""
        if isinstance(target, BranchTarget):
            return await self.fetch_branch(source, target, staging_dir)
        if isinstance(target, ReleaseTarget):
            return await self.fetch_release(source, target, staging_dir)
        assert_never(target)

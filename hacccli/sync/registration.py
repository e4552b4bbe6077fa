"""Helpers for registering a new component."""

import json
import os
from pathlib import Path
from typing import Any

from hacccli.core.logger.logger import get_logger
from hacccli.models.component import Component, TrackingPolicy
from hacccli.models.release import SourceIdentifier
from hacccli.models.sync import StagedArtifact, UpdateTarget
from hacccli.sync.catalog.base import ReleaseCatalog
from hacccli.sync.fetcher import ArchiveFetcher

logger = get_logger(__name__)

HACS_MANIFEST = "hacs.json"

DEPLOYMENT_LOCATIONS = [
    "config/custom_components",
    "config/www/custom_components",
]


async def load_hacs_manifest(catalog: ReleaseCatalog, source: SourceIdentifier) -> dict[str, Any] | None:
    """Read the HACS manifest from the repository root.

    Args:
        catalog: Release catalog.
        source: Repository to inspect.

    Returns:
        Parsed manifest, or None if the repository has none.
    """
    text = await catalog.get_file_text(source.owner, source.repo, HACS_MANIFEST)
    if text is None:
        return None

    try:
        manifest = json.loads(text)
    except json.JSONDecodeError as e:
        logger.warning(f"Ignoring malformed {HACS_MANIFEST} in {source}: {e}")
        return None

    return manifest if isinstance(manifest, dict) else None


def find_content_base_dir(root: Path, manifest: dict[str, Any] | None) -> str | None:
    """Locate the directory holding the file the manifest names.

    Args:
        root: Staged release or branch directory.
        manifest: HACS manifest, may be None.

    Returns:
        Directory relative to root ("" for root itself), or None if unknown.
    """
    filename = (manifest or {}).get("filename")
    if not filename or not isinstance(filename, str):
        return None

    matches = sorted(p for p in root.rglob(Path(filename).name) if p.is_file())
    if not matches:
        return None

    base_dir = os.path.relpath(matches[0].parent, root)
    return "" if base_dir == "." else Path(base_dir).as_posix()


async def stage_preview(
    fetcher: ArchiveFetcher, source: SourceIdentifier, target: UpdateTarget, staging_dir: Path
) -> StagedArtifact:
    """Stage the content a new registration would deploy, for inspection only."""
    logger.info(f"Staging preview of {source} in {staging_dir}")
    return await fetcher.fetch(source, target, staging_dir)


def list_subdirectories(root: Path, base_dir: str = "") -> list[str]:
    """Return the names of directories below root/base_dir."""
    directory = root / base_dir
    return sorted(p.name for p in directory.iterdir() if p.is_dir())


def list_content(root: Path) -> list[str]:
    """Return the entry names of a staged directory."""
    return sorted(p.name for p in root.iterdir())


def new_component(url: str, name: str, local_path: str, policy: TrackingPolicy) -> Component:
    """Create a component that has never been synced."""
    return Component(url=url, name=name, local_path=local_path, policy=policy, version=None)

"""Pytest configuration and shared fixtures."""

import shutil
import tempfile
from pathlib import Path
from typing import Generator

import pytest

from hacccli.core.config.settings import (
    GitHubSettings,
    LoggingSettings,
    Settings,
    StagingSettings,
    StoreSettings,
)
from hacccli.models.component import BranchPolicy, Component, ReleasePolicy, UpdateTier
from hacccli.sync.engine import SyncContext
from hacccli.sync.store import ComponentStore
from tests.fakes import FakeReleaseCatalog


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory that is cleaned up after the test.

    Yields:
        Path to the temporary directory.
    """
    temp_path = Path(tempfile.mkdtemp())
    yield temp_path
    shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def settings(temp_dir: Path) -> Settings:
    """Create settings pointing store and staging into the temp directory."""
    return Settings(
        store=StoreSettings(path=temp_dir / "hacccli-db.json"),
        github=GitHubSettings(token=None),
        staging=StagingSettings(base_dir=temp_dir / "staging", isolated=True, prefix="test_"),
        logging=LoggingSettings(level="DEBUG", use_rich=False),
    )


@pytest.fixture
def store(settings: Settings) -> ComponentStore:
    """Create an empty component store."""
    return ComponentStore(settings.store.path)


@pytest.fixture
def catalog() -> FakeReleaseCatalog:
    """Create an empty in-memory catalog."""
    return FakeReleaseCatalog()


@pytest.fixture
def sync_context(store: ComponentStore, catalog: FakeReleaseCatalog, settings: Settings) -> SyncContext:
    """Create a sync context bound to the fake catalog."""
    return SyncContext(store=store, catalog=catalog, settings=settings)


@pytest.fixture
def deploy_dir(temp_dir: Path) -> Path:
    """Directory components are deployed into."""
    path = temp_dir / "config" / "custom_components"
    path.mkdir(parents=True)
    return path


@pytest.fixture
def branch_component(deploy_dir: Path) -> Component:
    """Component following the master branch of owner/repo."""
    return Component(
        url="https://github.com/owner/repo",
        name="repo",
        local_path=str(deploy_dir),
        policy=BranchPolicy(branch_name="master"),
    )


@pytest.fixture
def release_component(deploy_dir: Path) -> Component:
    """Component following releases of owner/lib within the minor tier."""
    return Component(
        url="https://github.com/owner/lib",
        name="lib",
        local_path=str(deploy_dir),
        policy=ReleasePolicy(tier=UpdateTier.MINOR),
    )

"""Tests for the registration wizard."""

from contextlib import contextmanager
from pathlib import Path
from unittest.mock import AsyncMock, patch

import pytest

from hacccli.cli.wizard import add_component
from hacccli.models.component import BranchPolicy, ReleasePolicy, UpdateTier
from hacccli.models.sync import SyncStatus
from hacccli.sync.engine import SyncContext, SyncEngine
from hacccli.sync.store import ComponentStore
from tests.fakes import FakeReleaseCatalog, make_release

URL = "https://github.com/owner/repo"


@contextmanager
def _answers(**values):
    """Patch wizard prompts with fixed answers."""
    mocks = {name: AsyncMock(return_value=value) for name, value in values.items()}
    with patch.multiple("hacccli.cli.wizard", **mocks):
        yield mocks


class TestAddComponent:
    """Tests for add_component."""

    @pytest.mark.asyncio
    async def test_register_branch_component(
        self,
        sync_context: SyncContext,
        store: ComponentStore,
        catalog: FakeReleaseCatalog,
        deploy_dir: Path,
    ) -> None:
        """Test registering a branch with content located through hacs.json."""
        repository = catalog.repository("owner", "repo")
        repository.heads = {"master": "abcdef1234", "dev": "999"}
        repository.files["hacs.json"] = '{"filename": "sensor.py"}'
        repository.archive_files = {"README.md": "", "custom_components/repo/sensor.py": "s"}

        with _answers(
            select_branch="master",
            select_location=str(deploy_dir),
            prompt_component_name="my_repo",
        ):
            outcome = await add_component(SyncEngine(sync_context), URL + "/")

        assert outcome.status == SyncStatus.DOWNLOADED
        component = store.get(URL)
        assert component.name == "my_repo"
        assert component.version == "abcdef1234"
        assert component.policy == BranchPolicy(branch_name="master", base_path="custom_components/repo")
        assert [p.name for p in (deploy_dir / "my_repo").iterdir()] == ["sensor.py"]

    @pytest.mark.asyncio
    async def test_register_release_component(
        self,
        sync_context: SyncContext,
        store: ComponentStore,
        catalog: FakeReleaseCatalog,
        deploy_dir: Path,
    ) -> None:
        """Test registering a release asset."""
        release = make_release("v1.0.0", "card.js", "card.js.gz")
        catalog.repository("owner", "repo").releases = [release]
        catalog.downloads[release.assets[0].download_url] = {"card.js": b"js"}

        with _answers(
            select_tracking_type="releases",
            select_asset="card.js",
            select_tier=UpdateTier.MINOR,
            select_location=str(deploy_dir),
            prompt_component_name="repo",
        ) as mocks:
            outcome = await add_component(SyncEngine(sync_context), URL)

        assert outcome.status == SyncStatus.DOWNLOADED
        assert outcome.new_version == "1.0.0"
        assert store.get(URL).policy == ReleasePolicy(asset_name="card.js", tier=UpdateTier.MINOR)
        assert (deploy_dir / "repo" / "card.js").read_bytes() == b"js"
        assert mocks["select_asset"].await_args.args[0] == ["card.js", "card.js.gz"]

    @pytest.mark.asyncio
    async def test_manual_base_dir(
        self,
        sync_context: SyncContext,
        store: ComponentStore,
        catalog: FakeReleaseCatalog,
        deploy_dir: Path,
    ) -> None:
        """Test picking the component directory by hand when the content is rejected."""
        repository = catalog.repository("owner", "repo")
        repository.heads = {"main": "abcdef1234"}
        repository.archive_files = {"src/repo/a.py": "", "README.md": ""}

        with _answers(
            select_branch="main",
            confirm_content=False,
            select_base_dir_manually="src/repo",
            select_location=str(deploy_dir),
            prompt_component_name="repo",
        ):
            await add_component(SyncEngine(sync_context), URL)

        assert store.get(URL).policy.base_path == "src/repo"
        assert [p.name for p in (deploy_dir / "repo").iterdir()] == ["a.py"]

    @pytest.mark.asyncio
    async def test_duplicate_url(
        self,
        sync_context: SyncContext,
        store: ComponentStore,
        catalog: FakeReleaseCatalog,
        branch_component,
    ) -> None:
        """Test that a registered url is refused before any download."""
        store.register(branch_component)

        result = await add_component(SyncEngine(sync_context), URL)

        assert result is None
        assert catalog.calls == []

    @pytest.mark.asyncio
    async def test_cancel(self, sync_context: SyncContext, store: ComponentStore) -> None:
        """Test that canceling the url prompt adds nothing."""
        with _answers(prompt_repository_url=None):
            result = await add_component(SyncEngine(sync_context))

        assert result is None
        assert store.list_all() == []

    @pytest.mark.asyncio
    async def test_invalid_url(self, sync_context: SyncContext, store: ComponentStore) -> None:
        """Test that a url without owner/repo is reported."""
        result = await add_component(SyncEngine(sync_context), "https://example.com/x")

        assert result is None
        assert store.list_all() == []

    @pytest.mark.asyncio
    async def test_preview_is_cleaned_up(
        self,
        sync_context: SyncContext,
        settings,
        catalog: FakeReleaseCatalog,
        deploy_dir: Path,
    ) -> None:
        """Test that no staging directory remains after registration."""
        repository = catalog.repository("owner", "repo")
        repository.heads = {"master": "abcdef1234"}
        repository.archive_files = {"a.py": ""}

        with _answers(
            select_branch="master",
            confirm_content=True,
            select_location=str(deploy_dir),
            prompt_component_name="repo",
        ):
            await add_component(SyncEngine(sync_context), URL)

        assert list(Path(settings.staging.base_dir).iterdir()) == []

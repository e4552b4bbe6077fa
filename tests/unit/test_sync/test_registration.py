"""Tests for component registration helpers."""

from pathlib import Path

import pytest

from hacccli.models.component import BranchPolicy
from hacccli.models.release import SourceIdentifier
from hacccli.models.sync import BranchTarget
from hacccli.sync.fetcher import ArchiveFetcher
from hacccli.sync.registration import (
    find_content_base_dir,
    list_content,
    list_subdirectories,
    load_hacs_manifest,
    new_component,
    stage_preview,
)
from tests.fakes import FakeReleaseCatalog

SOURCE = SourceIdentifier(owner="owner", repo="repo", url="https://github.com/owner/repo")


@pytest.fixture
def staged(temp_dir: Path) -> Path:
    root = temp_dir / "unzipped"
    (root / "custom_components" / "repo").mkdir(parents=True)
    (root / "custom_components" / "repo" / "card.js").write_text("")
    (root / "docs").mkdir()
    (root / "README.md").write_text("")
    return root


class TestHacsManifest:
    """Tests for load_hacs_manifest."""

    @pytest.mark.asyncio
    async def test_manifest_present(self, catalog: FakeReleaseCatalog) -> None:
        """Test reading hacs.json from the repository root."""
        catalog.repository("owner", "repo").files["hacs.json"] = '{"name": "Card", "filename": "card.js"}'

        manifest = await load_hacs_manifest(catalog, SOURCE)

        assert manifest == {"name": "Card", "filename": "card.js"}

    @pytest.mark.asyncio
    async def test_manifest_missing(self, catalog: FakeReleaseCatalog) -> None:
        """Test a repository without hacs.json."""
        catalog.repository("owner", "repo")

        assert await load_hacs_manifest(catalog, SOURCE) is None

    @pytest.mark.asyncio
    @pytest.mark.parametrize("text", ["{broken", "[1, 2]"])
    async def test_manifest_unusable(self, catalog: FakeReleaseCatalog, text: str) -> None:
        """Test that malformed manifests are ignored."""
        catalog.repository("owner", "repo").files["hacs.json"] = text

        assert await load_hacs_manifest(catalog, SOURCE) is None


class TestContentDiscovery:
    """Tests for locating component files in staged content."""

    def test_base_dir_from_manifest_filename(self, staged: Path) -> None:
        """Test that the directory holding the manifest file is found."""
        assert find_content_base_dir(staged, {"filename": "card.js"}) == "custom_components/repo"

    def test_file_at_root(self, staged: Path) -> None:
        """Test that a file at the root yields an empty base dir."""
        assert find_content_base_dir(staged, {"filename": "README.md"}) == ""

    @pytest.mark.parametrize("manifest", [None, {}, {"filename": "missing.js"}, {"filename": 3}])
    def test_unknown_base_dir(self, staged: Path, manifest: dict | None) -> None:
        """Test that no base dir is guessed without a usable manifest."""
        assert find_content_base_dir(staged, manifest) is None

    def test_listings(self, staged: Path) -> None:
        """Test directory listings shown to the user."""
        assert list_subdirectories(staged) == ["custom_components", "docs"]
        assert list_subdirectories(staged, "custom_components") == ["repo"]
        assert list_content(staged) == ["README.md", "custom_components", "docs"]


def test_new_component_has_no_version() -> None:
    """Test that new components start unsynced."""
    component = new_component(
        "https://github.com/owner/repo",
        "repo",
        "config/custom_components",
        BranchPolicy(branch_name="main"),
    )

    assert component.version is None
    assert component.policy.branch_name == "main"


@pytest.mark.asyncio
async def test_stage_preview_of_branch(catalog: FakeReleaseCatalog, temp_dir: Path) -> None:
    """Test that the preview stages the flattened branch content."""
    catalog.repository("owner", "repo").archive_files = {"custom_components/repo/card.js": "x"}
    target = BranchTarget(branch="main", commit="abcdef1234")

    artifact = await stage_preview(ArchiveFetcher(catalog), SOURCE, target, temp_dir)

    assert artifact.archive_ref == "abcdef1"
    assert (artifact.path / "custom_components" / "repo" / "card.js").read_text() == "x"

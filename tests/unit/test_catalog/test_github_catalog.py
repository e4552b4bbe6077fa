"""Tests for the GitHub catalog helpers."""

from collections.abc import AsyncGenerator
from pathlib import Path

import pytest
import pytest_asyncio
from aiohttp import web
from aiohttp.test_utils import TestServer

from hacccli.core.exceptions.errors import RemoteAPIError
from hacccli.sync.catalog.github import (
    GitHubCatalog,
    filename_from_url,
    is_rate_limited,
    parse_release,
    sort_latest_first,
)
from tests.fakes import make_release


class TestParseRelease:
    """Tests for parse_release."""

    def test_parse_api_object(self) -> None:
        """Test converting a GitHub release object."""
        release = parse_release(
            {
                "tag_name": "v1.2.0",
                "created_at": "2024-03-01T12:00:00Z",
                "prerelease": True,
                "assets": [
                    {
                        "name": "lib.zip",
                        "browser_download_url": "https://github.com/o/r/releases/download/v1.2.0/lib.zip",
                    }
                ],
            }
        )

        assert release.tag_name == "v1.2.0"
        assert release.prerelease
        assert release.created_at.year == 2024
        assert release.created_at.tzinfo is not None
        assert release.find_asset("lib.zip").download_url.endswith("/lib.zip")

    def test_parse_minimal_object(self) -> None:
        """Test a release without assets or timestamps."""
        release = parse_release({"tag_name": "nightly", "assets": None})

        assert release.assets == ()
        assert release.created_at is None


def test_sort_latest_first() -> None:
    """Test ordering by semantic version with non-semver tags last."""
    releases = [make_release(t) for t in ("1.9.0", "nightly", "v1.10.0", "2.0.0-rc.1", "latest")]

    ordered = [r.tag_name for r in sort_latest_first(releases)]

    assert ordered == ["2.0.0-rc.1", "v1.10.0", "1.9.0", "nightly", "latest"]


@pytest.mark.parametrize(
    ("url", "expected"),
    [
        ("https://example.com/a/b/file%20name.zip", "file name.zip"),
        ("https://example.com/a/b/card.js?raw=1", "card.js"),
        ("https://example.com/", "download"),
    ],
)
def test_filename_from_url(url: str, expected: str) -> None:
    """Test deriving a file name from a url."""
    assert filename_from_url(url) == expected


@pytest.mark.parametrize(
    ("status", "headers", "expected"),
    [
        (429, {}, True),
        (403, {"X-RateLimit-Remaining": "0"}, True),
        (403, {"X-RateLimit-Remaining": "12"}, False),
        (404, {}, False),
    ],
)
def test_is_rate_limited(status: int, headers: dict, expected: bool) -> None:
    """Test rate limit detection."""
    assert is_rate_limited(status, headers) is expected


class TestGitHubCatalog:
    """Tests for request construction."""

    def test_headers_with_token(self) -> None:
        """Test that a token is sent as bearer authorization."""
        headers = GitHubCatalog(token="ghp_x")._get_headers()

        assert headers["Authorization"] == "Bearer ghp_x"
        assert headers["Accept"] == "application/vnd.github+json"

    def test_headers_without_token(self) -> None:
        """Test anonymous requests."""
        assert "Authorization" not in GitHubCatalog()._get_headers()

    def test_repo_url(self) -> None:
        """Test repository endpoint urls."""
        catalog = GitHubCatalog(api_url="https://api.github.com/")

        assert catalog._repo_url("o", "r", "branches", "feature/x") == (
            "https://api.github.com/repos/o/r/branches/feature%2Fx"
        )

    @pytest.mark.asyncio
    async def test_close_without_session(self) -> None:
        """Test closing a catalog that never sent a request."""
        async with GitHubCatalog() as catalog:
            pass

        assert catalog._session is None


def _github_app() -> web.Application:
    async def branch(request: web.Request) -> web.Response:
        return web.json_response({"name": "master", "commit": {"sha": "abc123"}})

    async def releases(request: web.Request) -> web.Response:
        assert request.query["per_page"] == "100"
        return web.json_response([{"tag_name": t, "assets": []} for t in ("1.0.0", "dev", "1.1.0")])

    async def limited(request: web.Request) -> web.Response:
        return web.json_response(
            {"message": "API rate limit exceeded"},
            status=403,
            headers={"X-RateLimit-Remaining": "0"},
        )

    async def hacs(request: web.Request) -> web.Response:
        assert request.headers["Accept"] == "application/vnd.github.raw"
        return web.Response(text='{"filename": "card.js"}')

    async def asset(request: web.Request) -> web.Response:
        return web.Response(
            body=b"card",
            headers={"Content-Disposition": 'attachment; filename="card-1.0.js"'},
        )

    async def malformed(request: web.Request) -> web.Response:
        return web.Response(text="{not json", content_type="application/json")

    async def renamed(request: web.Request) -> web.Response:
        return web.json_response({"name": "master", "object": {"sha": "abc123"}})

    app = web.Application()
    app.router.add_get("/repos/o/r/branches/master", branch)
    app.router.add_get("/repos/o/r/releases", releases)
    app.router.add_get("/repos/o/limited/releases", limited)
    app.router.add_get("/repos/o/r/contents/hacs.json", hacs)
    app.router.add_get("/download/card.js", asset)
    app.router.add_get("/repos/o/broken/releases", malformed)
    app.router.add_get("/repos/o/broken/branches/master", renamed)
    return app


@pytest_asyncio.fixture
async def github_server() -> AsyncGenerator[TestServer, None]:
    """Serve a small subset of the GitHub API locally."""
    server = TestServer(_github_app())
    await server.start_server()
    yield server
    await server.close()


class TestGitHubCatalogRequests:
    """Tests against a local HTTP server."""

    @pytest.mark.asyncio
    async def test_branch_head(self, github_server: TestServer) -> None:
        """Test resolving a branch head."""
        async with GitHubCatalog(api_url=str(github_server.make_url("/"))) as catalog:
            assert await catalog.get_branch_head("o", "r", "master") == "abc123"

    @pytest.mark.asyncio
    async def test_list_releases_latest_first(self, github_server: TestServer) -> None:
        """Test that releases come back ordered by version."""
        async with GitHubCatalog(api_url=str(github_server.make_url("/"))) as catalog:
            releases = await catalog.list_releases("o", "r")

        assert [r.tag_name for r in releases] == ["1.1.0", "1.0.0", "dev"]

    @pytest.mark.asyncio
    async def test_rate_limit_error(self, github_server: TestServer) -> None:
        """Test that rate limiting is reported."""
        async with GitHubCatalog(api_url=str(github_server.make_url("/"))) as catalog:
            with pytest.raises(RemoteAPIError) as exc_info:
                await catalog.list_releases("o", "limited")

        assert exc_info.value.status == 403
        assert exc_info.value.rate_limited

    @pytest.mark.asyncio
    async def test_malformed_json(self, github_server: TestServer) -> None:
        """Test that an unparsable body is reported as a remote error."""
        async with GitHubCatalog(api_url=str(github_server.make_url("/"))) as catalog:
            with pytest.raises(RemoteAPIError, match="malformed JSON"):
                await catalog.list_releases("o", "broken")

    @pytest.mark.asyncio
    async def test_unexpected_payload_shape(self, github_server: TestServer) -> None:
        """Test that a response without the expected keys is reported as a remote error."""
        async with GitHubCatalog(api_url=str(github_server.make_url("/"))) as catalog:
            with pytest.raises(RemoteAPIError, match="Unexpected GitHub API response"):
                await catalog.get_branch_head("o", "broken", "master")

    @pytest.mark.asyncio
    async def test_file_text(self, github_server: TestServer) -> None:
        """Test reading a file and a missing file."""
        async with GitHubCatalog(api_url=str(github_server.make_url("/"))) as catalog:
            assert await catalog.get_file_text("o", "r", "hacs.json") == '{"filename": "card.js"}'
            assert await catalog.get_file_text("o", "r", "missing.json") is None

    @pytest.mark.asyncio
    async def test_download_uses_content_disposition(
        self, github_server: TestServer, temp_dir: Path
    ) -> None:
        """Test that the server chosen file name is used."""
        async with GitHubCatalog(api_url=str(github_server.make_url("/"))) as catalog:
            await catalog.download_asset(str(github_server.make_url("/download/card.js")), temp_dir)

        assert (temp_dir / "card-1.0.js").read_bytes() == b"card"

    @pytest.mark.asyncio
    async def test_download_not_found(self, github_server: TestServer, temp_dir: Path) -> None:
        """Test that a failed download leaves no file behind."""
        async with GitHubCatalog(api_url=str(github_server.make_url("/"))) as catalog:
            with pytest.raises(RemoteAPIError) as exc_info:
                await catalog.download_asset(str(github_server.make_url("/download/none.js")), temp_dir)

        assert exc_info.value.not_found
        assert list(temp_dir.iterdir()) == []

"""Parsing of component source urls."""

import re
from urllib.parse import quote, urlparse

from hacccli.core.exceptions.errors import UnparsableSourceIdentifier
from hacccli.models.release import SourceIdentifier

_PATH_PATTERN = re.compile(r"^/([^/\s]+)/([^/\s]+?)(?:\.git)?/?$")


def normalize_source_url(url: str) -> str:
    """Strip whitespace and trailing slashes from a source url.

    Args:
        url: Url as entered by the user.

    Returns:
        Normalized url used as the component key.
    """
    return url.strip().rstrip("/")


def parse_source_url(url: str, web_url: str = "https://github.com") -> SourceIdentifier:
    """Parse a repository url into owner and repository name.

    Args:
        url: Repository url, e.g. https://github.com/owner/repo(.git).
        web_url: Base url of the hosting service.

    Returns:
        SourceIdentifier for the repository.

    Raises:
        UnparsableSourceIdentifier: If the url does not name an owner/repo.
    """
    parsed = urlparse(url.strip())
    expected_host = urlparse(web_url).netloc.lower()

    if parsed.scheme not in ("http", "https") or parsed.netloc.lower() != expected_host:
        raise UnparsableSourceIdentifier(url)

    match = _PATH_PATTERN.match(parsed.path)
    if not match or parsed.query or parsed.fragment:
        raise UnparsableSourceIdentifier(url)

    return SourceIdentifier(owner=match.group(1), repo=match.group(2), url=url)


def tag_archive_url(source: SourceIdentifier, tag_name: str, web_url: str = "https://github.com") -> str:
    """Return the url of the source archive GitHub builds for a tag."""
    base = web_url.rstrip("/")
    return f"{base}/{source.owner}/{source.repo}/archive/refs/tags/{quote(tag_name)}.zip"

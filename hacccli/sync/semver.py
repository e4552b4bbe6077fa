"""Semantic version parsing and comparison for release tags."""

import re
from dataclasses import dataclass, field
from functools import total_ordering

_NUMERIC = r"0|[1-9]\d*"
_PRERELEASE_ID = rf"(?:{_NUMERIC}|\d*[a-zA-Z-][0-9a-zA-Z-]*)"
_BUILD_ID = r"[0-9a-zA-Z-]+"

SEMVER_PATTERN = re.compile(
    rf"^=?v?(?P<major>{_NUMERIC})\.(?P<minor>{_NUMERIC})\.(?P<patch>{_NUMERIC})"
    rf"(?:-(?P<prerelease>{_PRERELEASE_ID}(?:\.{_PRERELEASE_ID})*))?"
    rf"(?:\+(?P<build>{_BUILD_ID}(?:\.{_BUILD_ID})*))?$"
)


@total_ordering
@dataclass(frozen=True, eq=False)
class SemVer:
    """A parsed semantic version (https://semver.org)."""

    major: int
    minor: int
    patch: int
    prerelease: tuple[str, ...] = ()
    build: tuple[str, ...] = field(default=(), compare=False)

    @classmethod
    def parse(cls, text: str) -> "SemVer | None":
        """Parse a version string.

        A leading "=" or "v" (or "=v") and surrounding whitespace are
        accepted, e.g. "v1.2.3" and "=1.2.3" parse like "1.2.3".

        Args:
            text: Version or tag string.

        Returns:
            SemVer, or None if the string is not a valid semantic version.
        """
        match = SEMVER_PATTERN.match(text.strip())
        if not match:
            return None

        prerelease = match.group("prerelease")
        build = match.group("build")
        return cls(
            major=int(match.group("major")),
            minor=int(match.group("minor")),
            patch=int(match.group("patch")),
            prerelease=tuple(prerelease.split(".")) if prerelease else (),
            build=tuple(build.split(".")) if build else (),
        )

    def __str__(self) -> str:
        """Return the normalized version string."""
        version = f"{self.major}.{self.minor}.{self.patch}"
        if self.prerelease:
            version += "-" + ".".join(self.prerelease)
        if self.build:
            version += "+" + ".".join(self.build)
        return version

    def _precedence_key(self) -> tuple[int, int, int]:
        return (self.major, self.minor, self.patch)

    def __eq__(self, other: object) -> bool:
        """Compare by precedence; build metadata is ignored."""
        if not isinstance(other, SemVer):
            return NotImplemented
        return (
            self._precedence_key() == other._precedence_key()
            and self.prerelease == other.prerelease
        )

    def __hash__(self) -> int:
        return hash((self._precedence_key(), self.prerelease))

    def __lt__(self, other: "SemVer") -> bool:
        if not isinstance(other, SemVer):
            return NotImplemented
        if self._precedence_key() != other._precedence_key():
            return self._precedence_key() < other._precedence_key()
        return _compare_prerelease(self.prerelease, other.prerelease) < 0


def _compare_identifier(a: str, b: str) -> int:
    a_numeric = a.isdigit()
    b_numeric = b.isdigit()

    if a_numeric and b_numeric:
        n1, n2 = int(a), int(b)
        return (n1 > n2) - (n1 < n2)
    # Numeric identifiers always have lower precedence than alphanumeric ones
    if a_numeric:
        return -1
    if b_numeric:
        return 1
    return (a > b) - (a < b)


def _compare_prerelease(a: tuple[str, ...], b: tuple[str, ...]) -> int:
    # A version without pre-release has higher precedence
    if not a and not b:
        return 0
    if not a:
        return 1
    if not b:
        return -1

    for id_a, id_b in zip(a, b):
        result = _compare_identifier(id_a, id_b)
        if result:
            return result

    return (len(a) > len(b)) - (len(a) < len(b))


def parse_version(text: str | None) -> SemVer | None:
    """Parse a version string, returning None for anything invalid."""
    if not text:
        return None
    return SemVer.parse(text)

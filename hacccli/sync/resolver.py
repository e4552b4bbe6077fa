"""Version resolution: decide whether and to what a component is updated."""

from collections.abc import Awaitable, Callable
from enum import Enum
from typing import Final, assert_never

from hacccli.core.exceptions.errors import MissingReleaseAsset, UndeterminedVersion
from hacccli.core.logger.logger import get_logger
from hacccli.models.component import BranchPolicy, Component, ReleasePolicy, UpdateTier
from hacccli.models.release import Release, SourceIdentifier
from hacccli.models.sync import BranchTarget, ReleaseTarget, Resolution
from hacccli.sync.catalog.base import ReleaseCatalog
from hacccli.sync.semver import SemVer, parse_version
from hacccli.sync.source import parse_source_url

logger = get_logger(__name__)


class _Skip(Enum):
    SKIP = "skip"

    def __repr__(self) -> str:
        return "SKIP"


SKIP: Final = _Skip.SKIP
"""Returned by a decision callback to leave the component untouched."""

Decision = Release | _Skip
DecisionCallback = Callable[[Component, list[Release]], Awaitable[Decision]]


async def skip_decision(component: Component, candidates: list[Release]) -> Decision:
    """Decision callback for non-interactive runs: never leave the update tier."""
    return SKIP


def candidate_releases(releases: list[Release], installed: SemVer) -> list[Release]:
    """Return releases with a valid semver tag newer than the installed version.

    Catalog order is preserved.
    """
    candidates = []
    for release in releases:
        version = parse_version(release.tag_name)
        if version is not None and version > installed:
            candidates.append(release)
    return candidates


def matches_tier(version: SemVer, installed: SemVer, tier: UpdateTier) -> bool:
    """Check whether a newer version may be installed automatically.

    Args:
        version: Candidate version, already known to be greater.
        installed: Installed version.
        tier: Configured update tier.

    Returns:
        True if the candidate stays within the tier.
    """
    if tier is UpdateTier.MAJOR:
        return True
    if tier is UpdateTier.MINOR:
        return version.major == installed.major
    if tier is UpdateTier.PATCH:
        return (
            version.major == installed.major
            and version.minor == installed.minor
            and version.patch > installed.patch
        )
    assert_never(tier)


def select_by_tier(candidates: list[Release], installed: SemVer, tier: UpdateTier) -> Release | None:
    """Return the first candidate within the tier, in catalog order."""
    for release in candidates:
        version = parse_version(release.tag_name)
        if version is not None and matches_tier(version, installed, tier):
            return release
    return None


def release_target(release: Release, policy: ReleasePolicy) -> ReleaseTarget:
    """Pick the download of a release according to the policy.

    Releases without assets, and policies without an asset name, fall
    back to the tag source archive.

    Raises:
        UndeterminedVersion: If the release tag is not a semantic version.
        MissingReleaseAsset: If the configured asset is not attached.
    """
    version = parse_version(release.tag_name)
    if version is None:
        raise UndeterminedVersion(
            f"Release tag {release.tag_name} is not a valid semantic version",
            details={"tag_name": release.tag_name},
        )

    if not policy.asset_name or not release.assets:
        return ReleaseTarget(release=release, version=str(version))

    asset = release.find_asset(policy.asset_name)
    if asset is None:
        raise MissingReleaseAsset(policy.asset_name, release.tag_name)

    return ReleaseTarget(release=release, version=str(version), asset=asset)


class VersionResolver:
    """Decides for one component whether an update is due and which version to install."""

    def __init__(
        self,
        catalog: ReleaseCatalog,
        decide: DecisionCallback = skip_decision,
        web_url: str = "https://github.com",
    ) -> None:
        """Initialize the resolver.

        Args:
            catalog: Release catalog to consult.
            decide: Called with all newer releases when none matches the tier.
            web_url: Hosting service base url components are registered under.
        """
        self.catalog = catalog
        self.decide = decide
        self.web_url = web_url

    async def resolve(self, component: Component) -> Resolution:
        """Resolve the update target of a component.

        Args:
            component: Tracked component.

        Returns:
            Resolution with the target to install, if any.
        """
        source = parse_source_url(component.url, self.web_url)
        policy = component.policy

        if isinstance(policy, BranchPolicy):
            return await self._resolve_branch(source, component, policy)
        if isinstance(policy, ReleasePolicy):
            return await self._resolve_release(source, component, policy)
        assert_never(policy)

    async def _resolve_branch(
        self, source: SourceIdentifier, component: Component, policy: BranchPolicy
    ) -> Resolution:
        head = await self.catalog.get_branch_head(source.owner, source.repo, policy.branch_name)

        if component.version is not None and component.version == head:
            logger.info(f"{component.name}: branch {policy.branch_name} still at {head}")
            return Resolution.up_to_date()

        logger.info(f"{component.name}: branch {policy.branch_name} moved to {head}")
        return Resolution.update(BranchTarget(branch=policy.branch_name, commit=head))

    async def _resolve_release(
        self, source: SourceIdentifier, component: Component, policy: ReleasePolicy
    ) -> Resolution:
        if component.version is None:
            latest = await self.catalog.get_latest_release(source.owner, source.repo)
            logger.info(f"{component.name}: installing latest release {latest.tag_name}")
            return Resolution.update(release_target(latest, policy))

        installed = parse_version(component.version)
        if installed is None:
            raise UndeterminedVersion(
                f"Installed version {component.version} of {component.name} "
                f"is not a valid semantic version",
                details={"url": component.url},
            )

        releases = await self.catalog.list_releases(source.owner, source.repo)
        candidates = candidate_releases(releases, installed)
        if not candidates:
            return Resolution.up_to_date()

        selected = select_by_tier(candidates, installed, policy.tier)
        if selected is None:
            logger.info(
                f"{component.name}: {len(candidates)} newer release(s) outside "
                f"tier {policy.tier.value}"
            )
            decision = await self.decide(component, candidates)
            if decision is SKIP:
                return Resolution.deferred(candidates)
            selected = decision

        logger.info(f"{component.name}: selected release {selected.tag_name}")
        return Resolution.update(release_target(selected, policy))

"""Resolution and synchronization result models."""

from enum import Enum
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from hacccli.models.component import Component
from hacccli.models.release import Release, ReleaseAsset


class BranchTarget(BaseModel):
    """Branch archive pinned to a commit."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["branch"] = "branch"
    branch: str
    commit: str

    @property
    def version(self) -> str:
        """Version recorded after a successful sync."""
        return self.commit


class ReleaseTarget(BaseModel):
    """Release to install, with its asset or None for the tag source archive."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["release"] = "release"
    release: Release
    version: str = Field(description="Normalized semver of the release tag")
    asset: ReleaseAsset | None = None

    @property
    def uses_tag_archive(self) -> bool:
        """Return True when the tag source archive is downloaded."""
        return self.asset is None


UpdateTarget = BranchTarget | ReleaseTarget


class ResolutionStatus(str, Enum):
    """Outcome of version resolution."""

    UPDATE = "update"
    UP_TO_DATE = "up_to_date"
    DEFERRED = "deferred"


class Resolution(BaseModel):
    """Decision taken for one component."""

    model_config = ConfigDict(frozen=True)

    status: ResolutionStatus
    target: UpdateTarget | None = None
    candidates: tuple[Release, ...] = ()

    @classmethod
    def update(cls, target: UpdateTarget) -> "Resolution":
        """Create an update resolution."""
        return cls(status=ResolutionStatus.UPDATE, target=target)

    @classmethod
    def up_to_date(cls) -> "Resolution":
        """Create a no-update resolution."""
        return cls(status=ResolutionStatus.UP_TO_DATE)

    @classmethod
    def deferred(cls, candidates: list[Release]) -> "Resolution":
        """Create a resolution for newer releases that were skipped."""
        return cls(status=ResolutionStatus.DEFERRED, candidates=tuple(candidates))


class StagedArtifact(BaseModel):
    """A downloaded artifact waiting in the staging area."""

    model_config = ConfigDict(frozen=True)

    path: Path = Field(description="Extracted directory or single downloaded file")
    archive_ref: str | None = Field(
        default=None,
        description="Short commit hash taken from a ref archive wrapper folder",
    )


class SyncStatus(str, Enum):
    """Status signal emitted for each component."""

    UPDATED = "updated"
    DOWNLOADED = "downloaded"
    UP_TO_DATE = "up_to_date"
    DEFERRED = "deferred"
    FAILED = "failed"


class SyncOutcome(BaseModel):
    """Result of synchronizing a single component."""

    model_config = ConfigDict(frozen=True)

    component: Component
    status: SyncStatus
    previous_version: str | None = None
    new_version: str | None = None
    deployed_to: Path | None = None
    candidates: tuple[str, ...] = ()
    error: str | None = None

    def describe(self) -> str:
        """Return a human readable status line."""
        name = self.component.name
        if self.status == SyncStatus.UPDATED:
            return f"{name} updated from {self.previous_version} to {self.new_version}"
        if self.status == SyncStatus.DOWNLOADED:
            return f"{name} downloaded to {self.deployed_to}"
        if self.status == SyncStatus.UP_TO_DATE:
            return f"No new version available for component {name}."
        if self.status == SyncStatus.DEFERRED:
            return (
                f"New versions available for {name} ({', '.join(self.candidates)}), "
                f"but none of these match the configured update tier for installed "
                f"version '{self.previous_version}'."
            )
        return f"{name} failed: {self.error}"


class BatchReport(BaseModel):
    """Outcomes of one pass over all tracked components."""

    outcomes: list[SyncOutcome] = Field(default_factory=list)

    @property
    def failures(self) -> list[SyncOutcome]:
        """Outcomes of components that failed."""
        return [o for o in self.outcomes if o.status == SyncStatus.FAILED]

    @property
    def succeeded(self) -> bool:
        """Return True when no component failed."""
        return not self.failures

    def count(self, status: SyncStatus) -> int:
        """Count outcomes with the given status."""
        return sum(1 for o in self.outcomes if o.status == status)

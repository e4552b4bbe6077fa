"""Tracked component and tracking policy models."""

from enum import Enum
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field


class UpdateTier(str, Enum):
    """Granularity of automatic updates for release-tracked components."""

    PATCH = "patch"
    MINOR = "minor"
    MAJOR = "major"


class BranchPolicy(BaseModel):
    """Follow the head commit of a branch."""

    model_config = ConfigDict(frozen=True)

    type: Literal["branch"] = "branch"
    branch_name: str = Field(description="Name of the branch which should be tracked")
    base_path: str = Field(
        default="",
        description="Path of the component files inside the archive (empty = root)",
    )


class ReleasePolicy(BaseModel):
    """Follow published releases with semantic version tags."""

    model_config = ConfigDict(frozen=True)

    type: Literal["releases"] = "releases"
    asset_name: str = Field(
        default="",
        description="Release asset to download (empty = tag source archive)",
    )
    base_path: str = Field(
        default="",
        description="Path of the component files inside the release (empty = root)",
    )
    tier: UpdateTier = Field(
        default=UpdateTier.PATCH,
        description="Versions which are installed automatically",
    )


TrackingPolicy = Annotated[BranchPolicy | ReleasePolicy, Field(discriminator="type")]


class Component(BaseModel):
    """A custom component tracked on GitHub."""

    model_config = ConfigDict(frozen=True)

    url: str = Field(description="Url to the GitHub repository")
    name: str = Field(description="Directory name of the deployed component")
    local_path: str = Field(description="Directory the component is deployed into")
    policy: TrackingPolicy
    version: str | None = Field(
        default=None,
        description="Installed semver tag or commit hash, None before first sync",
    )

    def with_version(self, version: str | None) -> "Component":
        """Return a copy carrying another installed version."""
        return self.model_copy(update={"version": version})

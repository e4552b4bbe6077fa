"""Release catalog data models."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class ReleaseAsset(BaseModel):
    """A downloadable file attached to a release."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(description="File name of the asset")
    download_url: str = Field(description="Browser download url")


class Release(BaseModel):
    """A published release of a repository."""

    model_config = ConfigDict(frozen=True)

    tag_name: str
    assets: tuple[ReleaseAsset, ...] = ()
    created_at: datetime | None = None
    prerelease: bool = False

    def find_asset(self, name: str) -> ReleaseAsset | None:
        """Return the asset with the given file name, if attached."""
        for asset in self.assets:
            if asset.name == name:
                return asset
        return None


class SourceIdentifier(BaseModel):
    """Owner and repository a component url points at."""

    model_config = ConfigDict(frozen=True)

    owner: str
    repo: str
    url: str

    def __str__(self) -> str:
        """Return owner/repo."""
        return f"{self.owner}/{self.repo}"

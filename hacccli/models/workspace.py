"""Staging workspace models."""

from datetime import datetime
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field


class WorkspaceStatus(str, Enum):
    """Workspace status enumeration."""

    ACTIVE = "active"
    CLEANUP = "cleanup"
    DISPOSED = "disposed"


class WorkspaceConfig(BaseModel):
    """Configuration for staging workspaces."""

    base_dir: Path | None = Field(
        default=None,
        description="Base directory for workspaces (None = working directory)",
    )
    isolated: bool = Field(
        default=True,
        description="Create an empty directory per component sync",
    )
    prefix: str = Field(
        default="hacccli_",
        description="Prefix for workspace directory names",
    )


class WorkspaceInfo(BaseModel):
    """Information about a staging workspace."""

    name: str = Field(description="Unique workspace name")
    path: Path = Field(description="Absolute path to workspace directory")
    status: WorkspaceStatus = Field(
        default=WorkspaceStatus.ACTIVE,
        description="Current workspace status",
    )
    created_at: datetime = Field(
        default_factory=datetime.now,
        description="Workspace creation timestamp",
    )
    owned: bool = Field(
        default=True,
        description="Whether the directory is removed on cleanup",
    )

    def mark_cleanup(self) -> None:
        """Mark workspace as being cleaned up."""
        self.status = WorkspaceStatus.CLEANUP

    def mark_disposed(self) -> None:
        """Mark workspace as disposed."""
        self.status = WorkspaceStatus.DISPOSED

"""Data models module."""

from hacccli.models.component import (
    BranchPolicy,
    Component,
    ReleasePolicy,
    TrackingPolicy,
    UpdateTier,
)
from hacccli.models.release import Release, ReleaseAsset, SourceIdentifier
from hacccli.models.sync import (
    BatchReport,
    BranchTarget,
    ReleaseTarget,
    Resolution,
    ResolutionStatus,
    StagedArtifact,
    SyncOutcome,
    SyncStatus,
    UpdateTarget,
)
from hacccli.models.workspace import WorkspaceConfig, WorkspaceInfo, WorkspaceStatus

__all__ = [
    "BranchPolicy",
    "Component",
    "ReleasePolicy",
    "TrackingPolicy",
    "UpdateTier",
    "Release",
    "ReleaseAsset",
    "SourceIdentifier",
    "BatchReport",
    "BranchTarget",
    "ReleaseTarget",
    "Resolution",
    "ResolutionStatus",
    "StagedArtifact",
    "SyncOutcome",
    "SyncStatus",
    "UpdateTarget",
    "WorkspaceConfig",
    "WorkspaceInfo",
    "WorkspaceStatus",
]

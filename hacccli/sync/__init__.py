"""Sync core - version resolution, staging, deployment and persistence of components."""

from hacccli.sync.catalog import GitHubCatalog, ReleaseCatalog
from hacccli.sync.deployment import DeploymentSwapper
from hacccli.sync.engine import SyncContext, SyncEngine
from hacccli.sync.fetcher import ArchiveFetcher
from hacccli.sync.resolver import SKIP, DecisionCallback, VersionResolver, skip_decision
from hacccli.sync.store import ComponentStore
from hacccli.sync.workspace import WorkspaceManager

__all__ = [
    "ReleaseCatalog",
    "GitHubCatalog",
    "VersionResolver",
    "DecisionCallback",
    "SKIP",
    "skip_decision",
    "ArchiveFetcher",
    "DeploymentSwapper",
    "ComponentStore",
    "WorkspaceManager",
    "SyncContext",
    "SyncEngine",
]

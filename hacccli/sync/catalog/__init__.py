"""Release catalogs: the capability interface and its GitHub implementation."""

from hacccli.sync.catalog.base import ReleaseCatalog
from hacccli.sync.catalog.github import GitHubCatalog

__all__ = ["ReleaseCatalog", "GitHubCatalog"]

"""Exception definitions module."""

from hacccli.core.exceptions.errors import (
    AmbiguousDownloadResult,
    ArchiveLayoutError,
    ConfigurationError,
    DuplicateRegistration,
    FetchError,
    HacccliError,
    MissingReleaseAsset,
    RegistrationError,
    RemoteAPIError,
    StoreError,
    UndeterminedVersion,
    UnknownRegistration,
    UnparsableSourceIdentifier,
    WorkspaceError,
)

__all__ = [
    "HacccliError",
    "UnparsableSourceIdentifier",
    "RegistrationError",
    "DuplicateRegistration",
    "UnknownRegistration",
    "FetchError",
    "AmbiguousDownloadResult",
    "UndeterminedVersion",
    "ArchiveLayoutError",
    "MissingReleaseAsset",
    "RemoteAPIError",
    "StoreError",
    "WorkspaceError",
    "ConfigurationError",
]

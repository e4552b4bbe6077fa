"""Custom exception definitions for hacccli."""

from typing import Any


class HacccliError(Exception):
    """Base exception for all hacccli errors."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Error message.
            details: Additional error details.
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        """Return string representation of the error."""
        if self.details:
            return f"{self.message} - Details: {self.details}"
        return self.message


class UnparsableSourceIdentifier(HacccliError):
    """Raised when a source URL does not point at an owner/repo on GitHub."""

    def __init__(self, url: str) -> None:
        super().__init__(f"Cannot parse source url: {url}", details={"url": url})
        self.url = url


class RegistrationError(HacccliError):
    """Base class for component registration errors."""

    def __init__(self, message: str, url: str) -> None:
        super().__init__(message, details={"url": url})
        self.url = url


class DuplicateRegistration(RegistrationError):
    """Raised when a component url is registered a second time."""

    def __init__(self, url: str) -> None:
        super().__init__("Component already registered", url)


class UnknownRegistration(RegistrationError):
    """Raised when updating a component that was never registered."""

    def __init__(self, url: str) -> None:
        super().__init__("Component is not registered", url)


class FetchError(HacccliError):
    """Exception raised for artifact fetching errors."""

    def __init__(
        self,
        message: str,
        source_path: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize fetch error.

        Args:
            message: Error message.
            source_path: Path or URL of the artifact.
            details: Additional error details.
        """
        details = details or {}
        if source_path:
            details["source_path"] = source_path
        super().__init__(message, details)


class AmbiguousDownloadResult(FetchError):
    """Raised when a download did not produce exactly one new directory entry."""

    def __init__(self, directory: str, new_entries: list[str]) -> None:
        if new_entries:
            message = "Found more than one new file"
        else:
            message = "No new file found"
        super().__init__(
            message,
            source_path=directory,
            details={"new_entries": sorted(new_entries)},
        )
        self.new_entries = new_entries


class UndeterminedVersion(FetchError):
    """Raised when the version of a staged or installed artifact is unknown."""


class ArchiveLayoutError(FetchError):
    """Raised when an archive lacks the single wrapper folder it should have."""


class MissingReleaseAsset(FetchError):
    """Raised when a release does not carry the configured asset."""

    def __init__(self, asset_name: str, tag_name: str) -> None:
        super().__init__(
            f"Release {tag_name} has no asset named {asset_name}",
            details={"asset_name": asset_name, "tag_name": tag_name},
        )


class RemoteAPIError(HacccliError):
    """Exception raised when the release catalog answers with an error."""

    def __init__(
        self,
        message: str,
        status: int | None = None,
        url: str | None = None,
        rate_limited: bool = False,
    ) -> None:
        """Initialize remote API error.

        Args:
            message: Error message.
            status: HTTP status code, if a response was received.
            url: Requested URL.
            rate_limited: Whether the request was rejected by rate limiting.
        """
        details: dict[str, Any] = {}
        if status is not None:
            details["status"] = status
        if url:
            details["url"] = url
        if rate_limited:
            details["rate_limited"] = True
        super().__init__(message, details)
        self.status = status
        self.url = url
        self.rate_limited = rate_limited

    @property
    def not_found(self) -> bool:
        """Return True for 404 answers."""
        return self.status == 404


class StoreError(HacccliError):
    """Exception raised when the component store cannot be read or written."""

    def __init__(self, message: str, path: str | None = None) -> None:
        super().__init__(message, details={"path": path} if path else None)


class WorkspaceError(HacccliError):
    """Exception raised for staging workspace errors."""

    def __init__(
        self,
        message: str,
        workspace_name: str | None = None,
        workspace_path: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize workspace error.

        Args:
            message: Error message.
            workspace_name: Name of the workspace.
            workspace_path: Path to the workspace.
            details: Additional error details.
        """
        details = details or {}
        if workspace_name:
            details["workspace_name"] = workspace_name
        if workspace_path:
            details["workspace_path"] = workspace_path
        super().__init__(message, details)


class ConfigurationError(HacccliError):
    """Exception raised for configuration errors."""

    def __init__(
        self,
        message: str,
        config_key: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize configuration error.

        Args:
            message: Error message.
            config_key: Configuration key that caused the error.
            details: Additional error details.
        """
        details = details or {}
        if config_key:
            details["config_key"] = config_key
        super().__init__(message, details)

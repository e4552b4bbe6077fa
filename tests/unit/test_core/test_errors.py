"""Tests for the exception hierarchy."""

from hacccli.core.exceptions import (
    AmbiguousDownloadResult,
    DuplicateRegistration,
    FetchError,
    HacccliError,
    MissingReleaseAsset,
    RegistrationError,
    RemoteAPIError,
    UnknownRegistration,
    UnparsableSourceIdentifier,
)


def test_details_in_message() -> None:
    """Test that details are appended to the message."""
    error = HacccliError("Something failed", details={"key": "value"})

    assert str(error) == "Something failed - Details: {'key': 'value'}"
    assert str(HacccliError("Plain")) == "Plain"


def test_hierarchy() -> None:
    """Test that all errors share the base class."""
    assert issubclass(DuplicateRegistration, RegistrationError)
    assert issubclass(UnknownRegistration, RegistrationError)
    assert issubclass(AmbiguousDownloadResult, FetchError)
    assert issubclass(MissingReleaseAsset, FetchError)
    for error_type in (RegistrationError, FetchError, RemoteAPIError, UnparsableSourceIdentifier):
        assert issubclass(error_type, HacccliError)


def test_registration_errors_carry_url() -> None:
    """Test registration error attributes."""
    error = DuplicateRegistration("https://github.com/o/r")

    assert error.url == "https://github.com/o/r"
    assert error.message == "Component already registered"


def test_remote_api_error() -> None:
    """Test remote API error attributes."""
    error = RemoteAPIError("Rate limited", status=403, url="https://api", rate_limited=True)

    assert error.details == {"status": 403, "url": "https://api", "rate_limited": True}
    assert not error.not_found
    assert RemoteAPIError("Missing", status=404).not_found


def test_ambiguous_download_messages() -> None:
    """Test the messages for zero and several new entries."""
    assert AmbiguousDownloadResult("/tmp", []).message == "No new file found"
    assert AmbiguousDownloadResult("/tmp", ["a", "b"]).message == "Found more than one new file"

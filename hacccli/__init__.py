"""hacccli - keep GitHub-hosted custom components up to date."""

__version__ = "0.3.0"

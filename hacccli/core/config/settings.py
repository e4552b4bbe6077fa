"""Application settings using Pydantic Settings."""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from hacccli.core.config.loader import ConfigLoader

DEFAULT_CONFIG_FILE = Path("hacccli.yaml")


class StoreSettings(BaseSettings):
    """Component store configuration settings."""

    model_config = SettingsConfigDict(
        env_prefix="HACCCLI_STORE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    path: Path = Field(
        default=Path("hacccli-db.json"),
        description="JSON document holding credentials and tracked components",
    )


class GitHubSettings(BaseSettings):
    """GitHub release catalog settings."""

    model_config = SettingsConfigDict(
        env_prefix="HACCCLI_GITHUB_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    api_url: str = Field(
        default="https://api.github.com",
        description="GitHub REST API base URL",
    )
    web_url: str = Field(
        default="https://github.com",
        description="GitHub web URL components are registered under",
    )
    token: str | None = Field(
        default=None,
        description="Personal access token, overrides the stored credential",
    )
    timeout: float = Field(
        default=60.0,
        gt=0,
        le=3600,
        description="Request timeout in seconds",
    )
    per_page: int = Field(
        default=100,
        ge=1,
        le=100,
        description="Releases requested per listing",
    )

    @field_validator("token", mode="before")
    @classmethod
    def validate_token(cls, v: str | None) -> str | None:
        """Treat an empty token as unset."""
        if v is None or v == "":
            return None
        return v


class StagingSettings(BaseSettings):
    """Staging configuration settings."""

    model_config = SettingsConfigDict(
        env_prefix="HACCCLI_STAGING_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    base_dir: Path | None = Field(
        default=None,
        description="Base directory for staging (None = working directory)",
    )
    isolated: bool = Field(
        default=True,
        description="Stage every component sync in its own empty directory",
    )
    prefix: str = Field(
        default="hacccli_",
        description="Staging directory name prefix",
    )

    @field_validator("base_dir", mode="before")
    @classmethod
    def validate_base_dir(cls, v: str | None) -> Path | None:
        """Validate and convert base_dir to Path."""
        if v is None or v == "":
            return None
        return Path(v)


class LoggingSettings(BaseSettings):
    """Logging configuration settings."""

    model_config = SettingsConfigDict(
        env_prefix="HACCCLI_LOGGING_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    level: str = Field(
        default="WARNING",
        description="Log level",
    )
    format: str = Field(
        default="[%(name)s] %(message)s",
        description="Log format string",
    )
    file: Path | None = Field(
        default=None,
        description="Log file path",
    )
    use_rich: bool = Field(
        default=True,
        description="Use Rich console for output",
    )

    @field_validator("level", mode="before")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of {valid_levels}")
        return v_upper

    @field_validator("file", mode="before")
    @classmethod
    def validate_file(cls, v: str | None) -> Path | None:
        """Validate and convert file to Path."""
        if v is None or v == "":
            return None
        return Path(v)


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_prefix="HACCCLI_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    store: StoreSettings = Field(default_factory=StoreSettings)
    github: GitHubSettings = Field(default_factory=GitHubSettings)
    staging: StagingSettings = Field(default_factory=StagingSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    @classmethod
    def from_yaml(cls, path: Path) -> "Settings":
        """Load settings from YAML file.

        Args:
            path: Path to YAML configuration file.

        Returns:
            Settings instance with values from YAML.
        """
        loader = ConfigLoader(path)
        loader.load()

        return cls(
            store=StoreSettings(**loader.get_section("store")),
            github=GitHubSettings(**loader.get_section("github")),
            staging=StagingSettings(**loader.get_section("staging")),
            logging=LoggingSettings(**loader.get_section("logging")),
        )

    @classmethod
    def load(cls) -> "Settings":
        """Load settings from default locations.

        Priority: hacccli.yaml > environment variables > .env > defaults

        Returns:
            Settings instance.
        """
        if DEFAULT_CONFIG_FILE.exists():
            return cls.from_yaml(DEFAULT_CONFIG_FILE)

        return cls()


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Returns:
        Settings singleton.
    """
    return Settings.load()

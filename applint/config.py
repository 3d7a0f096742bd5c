"""Configuration management for applint."""

from pathlib import Path
from typing import Optional, Tuple

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .errors import ConfigurationError


class Settings(BaseSettings):
    """applint configuration settings.

    Action inputs arrive as ``INPUT_<NAME>`` variables and the runner context as
    ``GITHUB_*`` variables; everything else is read with the ``APPLINT_`` prefix.
    """

    model_config = SettingsConfigDict(
        env_prefix="APPLINT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # Credentials and revision range
    github_token: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("INPUT_GITHUB-TOKEN", "GITHUB_TOKEN"),
        description="Token used for all platform API calls",
    )
    base: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("INPUT_BASE", "APPLINT_BASE"),
        description="Base revision of the range to lint",
    )
    head_sha: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("INPUT_HEAD-SHA", "APPLINT_HEAD_SHA"),
        description="Head revision of the range to lint",
    )

    # Runner context
    github_repository: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("GITHUB_REPOSITORY"),
        description="owner/repo slug",
    )
    github_event_path: Optional[Path] = Field(
        default=None,
        validation_alias=AliasChoices("GITHUB_EVENT_PATH"),
        description="Path of the triggering event payload",
    )
    github_api_url: str = Field(
        default="https://api.github.com",
        validation_alias=AliasChoices("GITHUB_API_URL"),
        description="Platform REST API root",
    )
    github_output: Optional[Path] = Field(
        default=None,
        validation_alias=AliasChoices("GITHUB_OUTPUT"),
        description="File receiving step outputs",
    )
    github_step_summary: Optional[Path] = Field(
        default=None,
        validation_alias=AliasChoices("GITHUB_STEP_SUMMARY"),
        description="File receiving the job summary",
    )

    # Logging Configuration
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(
        default="console",
        description="Log format: json, console"
    )

    # Pipeline Configuration
    max_concurrent_fetches: int = Field(
        default=5,
        ge=1,
        description="Maximum concurrent content fetches and checker runs"
    )
    request_timeout: float = Field(
        default=30,
        description="Platform API request timeout in seconds"
    )
    checker_timeout: float = Field(
        default=120,
        description="Checker invocation timeout in seconds"
    )

    # Checker Configuration
    node_path: str = Field(default="node", description="Node.js executable")
    checker_module: str = Field(
        default="umbrel-cli/dist/lib.js",
        description="Module specifier of the checker library"
    )
    check_image_architectures: bool = Field(
        default=True,
        description="Ask the compose checker to verify image architectures"
    )

    # Reporting
    post_comment: bool = Field(
        default=True,
        description="Comment on the pull request when there is one"
    )
    create_check_run: bool = Field(
        default=False,
        description="Publish results as a check run with annotations"
    )
    check_name: str = Field(default="app-linter", description="Check run name")

    def repo_slug(self) -> Tuple[str, str]:
        """Split ``github_repository`` into owner and repository name."""
        if not self.github_repository:
            raise ConfigurationError("GITHUB_REPOSITORY is not set")
        owner, _, repo = self.github_repository.partition("/")
        if not owner or not repo or "/" in repo:
            raise ConfigurationError(
                f"Malformed repository slug: {self.github_repository!r}"
            )
        return owner, repo


# Global settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Reset the global settings instance (for testing)."""
    global _settings
    _settings = None

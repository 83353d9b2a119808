"""
Configuration management for the Alertmanager GitHub notifier.

Settings are read from environment variables (prefixed ``AMGN_``) and an
optional ``.env`` file; command-line flags override them at startup.
"""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .errors import ConfigurationError


DEFAULT_AUTH_FILE = "/etc/github/oauth"
DEFAULT_GITHUB_API_URL = "https://api.github.com"


class NotifierConfig(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="AMGN_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Server Configuration
    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=8080, description="Server port")
    log_level: str = Field(default="INFO", description="Logging level")

    # GitHub Configuration
    auth_file: str = Field(default=DEFAULT_AUTH_FILE, description="Path to GitHub OAuth token file")
    default_owner: str = Field(default="", description="Default org/owner when an alert has no owner label")
    default_repo: str = Field(default="", description="Default repo when an alert has no repo label")
    github_api_url: str = Field(default=DEFAULT_GITHUB_API_URL, description="GitHub API base URL")
    request_timeout_seconds: float = Field(default=30.0, description="GitHub API request timeout")

    dry_run: bool = Field(default=False, description="Format comments without calling the GitHub API")


def load_token(auth_file: str) -> str:
    """
    Read the GitHub OAuth token from ``auth_file``.

    Raises:
        ConfigurationError: if the file cannot be read.
    """
    try:
        return Path(auth_file).read_text(encoding="utf-8").strip()
    except OSError as e:
        raise ConfigurationError(f"failed to read auth file {auth_file}: {e}") from e


# Global configuration instance
config = NotifierConfig()

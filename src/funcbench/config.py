"""
Configuration management for funcbench.

Settings come from ``FUNCBENCH_``-prefixed environment variables and an
optional ``.env`` file. ``GITHUB_TOKEN`` is read without a prefix.
"""

from typing import Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .errors import ConfigurationError


class FuncbenchConfig(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="FUNCBENCH_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # GitHub Configuration
    owner: str = Field(default="prometheus", description="GitHub owner or organisation name")
    repo: str = Field(default="prometheus", description="GitHub repository name")
    github_pr: Optional[int] = Field(default=None, description="PR to benchmark and comment on")
    github_token: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("GITHUB_TOKEN", "FUNCBENCH_GITHUB_TOKEN"),
        description="GitHub API token",
    )
    github_api_url: str = Field(default="https://api.github.com", description="GitHub API base URL")
    log_link: str = Field(default="", description="Link to execution logs appended to error comments")

    # Benchmark Configuration
    compare_target: str = Field(default="", description="Tag, branch or commit SHA to compare against")
    bench_func_regex: str = Field(default=".", description="Benchmark function regex")
    workspace: str = Field(default="/tmp/funcbench", description="Directory to clone the GitHub PR into")
    result_cache: str = Field(default="funcbench-results", description="Directory to store benchmark results")
    bench_time: str = Field(default="1s", description="go test -benchtime value")
    timeout: str = Field(default="2h", description="go test -timeout value")
    package_path: str = Field(default="./...", description="Go package path to benchmark")

    verbose: bool = Field(default=False, description="Enable debug logging")

    @property
    def github_mode(self) -> bool:
        """Whether to benchmark a GitHub PR rather than the local working copy."""
        return self.github_pr is not None

    def require_github_token(self) -> str:
        if not self.github_token:
            raise ConfigurationError("GITHUB_TOKEN missing")
        return self.github_token


# Global configuration instance
config = FuncbenchConfig()

"""Exception hierarchy for funcbench."""

from typing import Optional


class FuncbenchError(Exception):
    """Base class for funcbench errors."""


class ConfigurationError(FuncbenchError):
    """Raised when required configuration (flag or environment) is missing."""


class EnvironmentSetupError(FuncbenchError):
    """Raised when preparing the repository (clone, fetch, checkout) fails."""


class BenchmarkError(FuncbenchError):
    """Raised when running or comparing benchmarks fails."""

    def __init__(self, message: str, output: str = ""):
        self.output = output
        super().__init__(message)


class GitHubAPIError(FuncbenchError):
    """Raised when a GitHub API call fails."""

    def __init__(self, message: str, status_code: Optional[int] = None, body: str = ""):
        self.status_code = status_code
        self.body = body
        super().__init__(message)

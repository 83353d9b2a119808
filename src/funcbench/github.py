"""GitHub REST client used to comment on the benchmarked pull request."""

from typing import Any, Dict, Optional

import httpx
import structlog

from .config import FuncbenchConfig
from .errors import GitHubAPIError


logger = structlog.get_logger(__name__)


class GitHubClient:
    """Comments on a single pull request of ``owner/repo``."""

    def __init__(
        self,
        owner: str,
        repo: str,
        pr_number: int,
        token: str,
        base_url: str = "https://api.github.com",
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.owner = owner
        self.repo = repo
        self.pr_number = pr_number
        self._client = httpx.Client(
            base_url=base_url,
            headers={
                "Accept": "application/vnd.github.v3+json",
                "Authorization": f"token {token}",
                "User-Agent": "funcbench",
            },
            timeout=30.0,
            transport=transport,
        )

    @classmethod
    def from_config(cls, cfg: FuncbenchConfig) -> "GitHubClient":
        """Build a client for ``cfg.github_pr``; fails without GITHUB_TOKEN."""
        return cls(
            owner=cfg.owner,
            repo=cfg.repo,
            pr_number=cfg.github_pr,
            token=cfg.require_github_token(),
            base_url=cfg.github_api_url,
        )

    def post_comment(self, comment: str) -> Dict[str, Any]:
        path = f"/repos/{self.owner}/{self.repo}/issues/{self.pr_number}/comments"
        try:
            response = self._client.post(path, json={"body": comment})
        except httpx.HTTPError as e:
            raise GitHubAPIError(f"POST {path}: {e}") from e
        if response.is_error:
            raise GitHubAPIError(
                f"POST {path}: {response.status_code} {response.reason_phrase}",
                status_code=response.status_code,
                body=response.text,
            )
        logger.debug("Posted PR comment", owner=self.owner, repo=self.repo, pr=self.pr_number)
        return response.json() if response.content else {}

    def close(self) -> None:
        self._client.close()

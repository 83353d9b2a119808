"""Minimal async GitHub REST client for posting issue comments."""

from typing import Any, Dict, Optional

import httpx
import structlog

from .config import DEFAULT_GITHUB_API_URL
from .errors import GitHubAPIError


logger = structlog.get_logger(__name__)


class GitHubClient:
    """Posts issue comments through the GitHub REST API."""

    def __init__(
        self,
        token: Optional[str] = None,
        base_url: str = DEFAULT_GITHUB_API_URL,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        headers = {
            "Accept": "application/vnd.github.v3+json",
            "User-Agent": "am-github-notifier",
        }
        if token:
            headers["Authorization"] = f"token {token}"

        self.authenticated = bool(token)
        self._client = httpx.AsyncClient(
            base_url=base_url,
            headers=headers,
            timeout=timeout,
            transport=transport,
        )

    async def create_issue_comment(
        self, owner: str, repo: str, number: int, body: str
    ) -> Dict[str, Any]:
        """Create a comment on issue or pull request ``number``."""
        path = f"/repos/{owner}/{repo}/issues/{number}/comments"
        try:
            response = await self._client.post(path, json={"body": body})
        except httpx.HTTPError as e:
            raise GitHubAPIError(f"POST {path}: {e}") from e

        if response.is_error:
            raise GitHubAPIError(
                f"POST {path}: {response.status_code} {response.reason_phrase}",
                status_code=response.status_code,
                body=response.text,
            )

        logger.debug(
            "Created issue comment",
            owner=owner,
            repo=repo,
            number=number,
            status_code=response.status_code,
        )
        return response.json() if response.content else {}

    async def aclose(self) -> None:
        await self._client.aclose()

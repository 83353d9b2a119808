"""
Alert-to-comment formatting and posting.

Each alert becomes one issue comment on the pull request named by its
``prNum`` label. The ``owner`` and ``repo`` labels are optional and fall back
to the receiver's configured defaults.

Example ``alerts.rules.yml``::

    groups:
    - name: groupname
      rules:
      - alert: alertname
        expr: up == 0
        for: 2m
        labels:
          severity: average
          prNum: '{{ $labels.prNum }}'
          owner: prometheus  # optional
          repo: prometheus   # optional
        annotations:
          description: 'description of the alert'
"""

import re
from typing import List, Optional

import structlog

from .config import NotifierConfig
from .errors import InvalidLabelError, MissingLabelError
from .github import GitHubClient
from .models import Alert, AlertManagerWebhook


logger = structlog.get_logger(__name__)

PR_NUMBER_LABEL = "prNum"

# Plain ASCII decimal, optionally signed.
_INTEGER_RE = re.compile(r"[+-]?[0-9]+")


def format_issue_comment_body(alert: Alert) -> str:
    """Render the Markdown comment body for a single alert."""
    alertname = alert.labels.alertname or "Alert"
    lines = [f"**{alertname}** is {alert.status.value}."]

    if alert.annotations.summary:
        lines.append("")
        lines.append(alert.annotations.summary)
    if alert.annotations.description:
        lines.append("")
        lines.append(alert.annotations.description)
    if alert.generatorURL:
        lines.append("")
        lines.append(f"[Source]({alert.generatorURL})")

    return "\n".join(lines)


def get_target_pr(alert: Alert) -> int:
    """
    Resolve the pull request number from the alert's ``prNum`` label.

    Raises:
        MissingLabelError: the label is absent or empty.
        InvalidLabelError: the label is not an integer.
    """
    value = alert.labels.prNum
    if not value:
        raise MissingLabelError(PR_NUMBER_LABEL)
    if not _INTEGER_RE.fullmatch(value):
        raise InvalidLabelError(PR_NUMBER_LABEL, value)
    return int(value)


class GhWebhookReceiver:
    """Turns AlertManager alerts into GitHub pull request comments."""

    def __init__(self, cfg: NotifierConfig, gh_client: GitHubClient):
        self.cfg = cfg
        self.gh_client = gh_client

    def get_target_owner(self, alert: Alert) -> str:
        return alert.labels.owner or self.cfg.default_owner

    def get_target_repo(self, alert: Alert) -> str:
        return alert.labels.repo or self.cfg.default_repo

    async def process_alert(self, alert: Alert) -> str:
        """Format the alert and post it to GitHub; returns the comment body."""
        msg_body = format_issue_comment_body(alert)
        pr_num = get_target_pr(alert)

        if self.cfg.dry_run:
            logger.info(
                "Dry run, skipping GitHub comment",
                owner=self.get_target_owner(alert),
                repo=self.get_target_repo(alert),
                pr=pr_num,
            )
            return msg_body

        await self.gh_client.create_issue_comment(
            self.get_target_owner(alert),
            self.get_target_repo(alert),
            pr_num,
            msg_body,
        )
        return msg_body

    async def process_alerts(self, msg: AlertManagerWebhook) -> List[str]:
        """Post one comment per alert, stopping at the first failure."""
        alert_comments = []
        for alert in msg.alerts:
            alert_comments.append(await self.process_alert(alert))
        return alert_comments


def new_gh_webhook_receiver(cfg: NotifierConfig, token: Optional[str] = None) -> GhWebhookReceiver:
    """Build a receiver; dry-run receivers get an unauthenticated client."""
    client = GitHubClient(
        token=None if cfg.dry_run else token,
        base_url=cfg.github_api_url,
        timeout=cfg.request_timeout_seconds,
    )
    return GhWebhookReceiver(cfg, client)

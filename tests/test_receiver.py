"""Tests for alert formatting and comment posting."""

import httpx
import pytest

from am_github_notifier.errors import (
    GitHubAPIError,
    InvalidLabelError,
    LabelError,
    MissingLabelError,
)
from am_github_notifier.github import GitHubClient
from am_github_notifier.models import Alert, AlertManagerWebhook
from am_github_notifier.receiver import (
    GhWebhookReceiver,
    format_issue_comment_body,
    get_target_pr,
    new_gh_webhook_receiver,
)

from conftest import RecordingGitHub, make_alert, make_webhook


def build_receiver(cfg, handler):
    client = GitHubClient(token="secret", transport=httpx.MockTransport(handler))
    return GhWebhookReceiver(cfg, client)


class TestGetTargetPR:
    """Test cases for PR number resolution."""

    def test_numeric_label(self):
        alert = Alert.model_validate(make_alert({"prNum": "42"}))
        assert get_target_pr(alert) == 42

    def test_missing_label(self):
        alert = Alert.model_validate(make_alert({}))
        with pytest.raises(MissingLabelError) as exc_info:
            get_target_pr(alert)
        assert exc_info.value.label == "prNum"

    def test_empty_label_is_missing(self):
        alert = Alert.model_validate(make_alert({"prNum": ""}))
        with pytest.raises(MissingLabelError):
            get_target_pr(alert)

    @pytest.mark.parametrize("value", ["+7", "-3", "007"])
    def test_signed_and_padded_integers(self, value):
        alert = Alert.model_validate(make_alert({"prNum": value}))
        assert get_target_pr(alert) == int(value)

    @pytest.mark.parametrize("value", ["4_2", "\u0664\u0662", " 42", "42\n", "4.2", "0x2a"])
    def test_rejects_non_decimal_forms(self, value):
        alert = Alert.model_validate(make_alert({"prNum": value}))
        with pytest.raises(InvalidLabelError):
            get_target_pr(alert)

    def test_non_numeric_label(self):
        alert = Alert.model_validate(make_alert({"prNum": "abc"}))
        with pytest.raises(InvalidLabelError) as exc_info:
            get_target_pr(alert)
        assert exc_info.value.value == "abc"
        assert isinstance(exc_info.value, LabelError)


class TestFormatIssueCommentBody:
    """Test cases for comment body formatting."""

    def test_includes_alert_details(self):
        alert = Alert.model_validate(
            make_alert({"prNum": "1"}, summary="Slow queries", description="p99 above 2s")
        )
        body = format_issue_comment_body(alert)

        assert body.startswith("**FuncbenchRegression** is firing.")
        assert "Slow queries" in body
        assert "p99 above 2s" in body
        assert "[Source](http://prometheus:9090/graph?g0.expr=up)" in body

    def test_resolved_alert_without_annotations(self):
        alert = Alert.model_validate(
            {"status": "resolved", "labels": {"alertname": "Up", "prNum": "3"}}
        )
        assert format_issue_comment_body(alert) == "**Up** is resolved."


class TestTargetRepository:
    """Test cases for owner/repo resolution."""

    def test_defaults(self, notifier_config):
        receiver = new_gh_webhook_receiver(notifier_config, token="secret")
        alert = Alert.model_validate(make_alert({"prNum": "1"}))

        assert receiver.get_target_owner(alert) == "prometheus"
        assert receiver.get_target_repo(alert) == "prometheus"

    def test_labels_override_defaults(self, notifier_config):
        receiver = new_gh_webhook_receiver(notifier_config, token="secret")
        alert = Alert.model_validate(
            make_alert({"prNum": "1", "owner": "grafana", "repo": "loki"})
        )

        assert receiver.get_target_owner(alert) == "grafana"
        assert receiver.get_target_repo(alert) == "loki"

    def test_dry_run_client_is_unauthenticated(self, dry_run_config):
        receiver = new_gh_webhook_receiver(dry_run_config, token="secret")
        assert receiver.gh_client.authenticated is False


class TestProcessAlert:
    """Test cases for posting a single alert."""

    @pytest.mark.asyncio
    async def test_posts_comment(self, notifier_config, github_api):
        receiver = build_receiver(notifier_config, github_api)
        alert = Alert.model_validate(
            make_alert({"prNum": "42", "owner": "grafana", "repo": "loki"})
        )

        body = await receiver.process_alert(alert)

        assert github_api.paths == ["/repos/grafana/loki/issues/42/comments"]
        assert github_api.bodies == [body]
        assert github_api.requests[0].headers["Authorization"] == "token secret"

    @pytest.mark.asyncio
    async def test_missing_label_makes_no_call(self, notifier_config, github_api):
        receiver = build_receiver(notifier_config, github_api)
        alert = Alert.model_validate(make_alert({}))

        with pytest.raises(MissingLabelError):
            await receiver.process_alert(alert)
        assert github_api.requests == []

    @pytest.mark.asyncio
    async def test_dry_run_returns_body_without_call(self, dry_run_config, github_api):
        receiver = build_receiver(dry_run_config, github_api)
        alert = Alert.model_validate(make_alert({"prNum": "7"}))

        body = await receiver.process_alert(alert)

        assert body == format_issue_comment_body(alert)
        assert github_api.requests == []

    @pytest.mark.asyncio
    async def test_api_error(self, notifier_config):
        receiver = build_receiver(notifier_config, RecordingGitHub(fail_on_call=1))
        alert = Alert.model_validate(make_alert({"prNum": "7"}))

        with pytest.raises(GitHubAPIError) as exc_info:
            await receiver.process_alert(alert)
        assert exc_info.value.status_code == 502
        assert exc_info.value.body == "bad gateway"


class TestProcessAlerts:
    """Test cases for processing a batch of alerts."""

    @pytest.mark.asyncio
    async def test_one_comment_per_alert_in_order(self, notifier_config, github_api):
        receiver = build_receiver(notifier_config, github_api)
        msg = AlertManagerWebhook.model_validate(
            make_webhook([make_alert({"prNum": str(n)}) for n in (1, 2, 3)])
        )

        comments = await receiver.process_alerts(msg)

        assert len(comments) == 3
        assert github_api.paths == [
            "/repos/prometheus/prometheus/issues/1/comments",
            "/repos/prometheus/prometheus/issues/2/comments",
            "/repos/prometheus/prometheus/issues/3/comments",
        ]

    @pytest.mark.asyncio
    async def test_stops_at_first_api_failure(self, notifier_config):
        github_api = RecordingGitHub(fail_on_call=2)
        receiver = build_receiver(notifier_config, github_api)
        msg = AlertManagerWebhook.model_validate(
            make_webhook([make_alert({"prNum": str(n)}) for n in (1, 2, 3, 4)])
        )

        with pytest.raises(GitHubAPIError):
            await receiver.process_alerts(msg)
        assert len(github_api.requests) == 2

    @pytest.mark.asyncio
    async def test_stops_at_first_label_failure(self, notifier_config, github_api):
        receiver = build_receiver(notifier_config, github_api)
        msg = AlertManagerWebhook.model_validate(
            make_webhook([
                make_alert({"prNum": "1"}),
                make_alert({"prNum": "2"}),
                make_alert({"prNum": "abc"}),
                make_alert({"prNum": "4"}),
            ])
        )

        with pytest.raises(InvalidLabelError):
            await receiver.process_alerts(msg)
        assert github_api.paths == [
            "/repos/prometheus/prometheus/issues/1/comments",
            "/repos/prometheus/prometheus/issues/2/comments",
        ]

    @pytest.mark.asyncio
    async def test_dry_run_batch_makes_no_calls(self, dry_run_config, github_api):
        receiver = build_receiver(dry_run_config, github_api)
        msg = AlertManagerWebhook.model_validate(
            make_webhook([make_alert({"prNum": "1"}), make_alert({"prNum": "2"})])
        )

        comments = await receiver.process_alerts(msg)

        assert len(comments) == 2
        assert github_api.requests == []

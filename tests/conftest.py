"""
Pytest configuration and shared fixtures.
"""

import json
from datetime import datetime, timezone
from typing import Any, Dict, List

import httpx
import pytest

from am_github_notifier.config import NotifierConfig


GO_BENCH_OLD = """goos: linux
goarch: amd64
pkg: github.com/prometheus/prometheus/tsdb
BenchmarkPostingsForMatchers/Head-8      1000     523 ns/op     64 B/op     2 allocs/op
BenchmarkQuerier-8                        200    9100 ns/op   1024 B/op    12 allocs/op
BenchmarkOnlyOld-8                        100     100 ns/op
PASS
ok      github.com/prometheus/prometheus/tsdb   3.214s
"""

GO_BENCH_NEW = """goos: linux
goarch: amd64
pkg: github.com/prometheus/prometheus/tsdb
BenchmarkPostingsForMatchers/Head-8      1000    68.6 ns/op     32 B/op     1 allocs/op
BenchmarkQuerier-8                        200    9100 ns/op   2048 B/op    12 allocs/op
PASS
ok      github.com/prometheus/prometheus/tsdb   2.991s
"""


def make_alert(labels: Dict[str, str], **annotations: str) -> Dict[str, Any]:
    """Create an AlertManager alert payload."""
    return {
        "status": "firing",
        "labels": {"alertname": "FuncbenchRegression", **labels},
        "annotations": annotations or {"description": "benchmark regressed"},
        "startsAt": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
        "endsAt": None,
        "generatorURL": "http://prometheus:9090/graph?g0.expr=up",
        "fingerprint": "abc123",
    }


def make_webhook(alerts: List[Dict[str, Any]]) -> Dict[str, Any]:
    """Create an AlertManager webhook payload."""
    return {
        "version": "4",
        "groupKey": '{}:{alertname="FuncbenchRegression"}',
        "truncatedAlerts": 0,
        "status": "firing",
        "receiver": "github",
        "groupLabels": {"alertname": "FuncbenchRegression"},
        "commonLabels": {"alertname": "FuncbenchRegression"},
        "commonAnnotations": {},
        "externalURL": "http://alertmanager:9093",
        "alerts": alerts,
    }


class RecordingGitHub:
    """httpx transport handler that records GitHub API calls."""

    def __init__(self, fail_on_call: int = 0):
        self.requests: List[httpx.Request] = []
        self.fail_on_call = fail_on_call

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.fail_on_call and len(self.requests) == self.fail_on_call:
            return httpx.Response(502, text="bad gateway")
        return httpx.Response(201, json={"id": len(self.requests)})

    @property
    def paths(self) -> List[str]:
        return [r.url.path for r in self.requests]

    @property
    def bodies(self) -> List[str]:
        return [json.loads(r.content)["body"] for r in self.requests]


@pytest.fixture
def notifier_config():
    return NotifierConfig(default_owner="prometheus", default_repo="prometheus")


@pytest.fixture
def dry_run_config():
    return NotifierConfig(default_owner="prometheus", default_repo="prometheus", dry_run=True)


@pytest.fixture
def github_api():
    return RecordingGitHub()

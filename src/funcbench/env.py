"""
Benchmark environments.

An environment owns the repository under test and decides where results and
errors go:

* ``Local`` benchmarks the current working copy and prints results.
* ``GitHub`` benchmarks a shallow clone of a pull request and comments on it.
"""

import io
import os
import sys
from dataclasses import dataclass
from typing import List, Protocol

import git
import structlog
from git.exc import GitError

from .benchcmp import BenchCmp, render
from .errors import EnvironmentSetupError, GitHubAPIError
from .github import GitHubClient
from .markdown import format_comment_to_md


logger = structlog.get_logger(__name__)

PULL_REQUEST_BRANCH = "pullrequest"


@dataclass
class EnvironmentSettings:
    """Invocation settings shared by both environments."""
    bench_func: str
    compare_target: str
    log_link: str = ""


class Environment(Protocol):
    """Where funcbench benchmarks and where it reports."""

    settings: EnvironmentSettings

    @property
    def bench_func(self) -> str: ...

    @property
    def compare_target(self) -> str: ...

    @property
    def repo(self) -> git.Repo: ...

    def post_err(self, err: str) -> None: ...

    def post_results(self, cmps: List[BenchCmp]) -> None: ...

    def close(self) -> None: ...


class Local:
    """The working copy containing the current directory."""

    def __init__(self, settings: EnvironmentSettings, repo: git.Repo):
        self.settings = settings
        self._repo = repo

    @property
    def bench_func(self) -> str:
        return self.settings.bench_func

    @property
    def compare_target(self) -> str:
        return self.settings.compare_target

    @property
    def repo(self) -> git.Repo:
        return self._repo

    def post_err(self, err: str) -> None:
        # Errors already reach the console through the exit path.
        return None

    def post_results(self, cmps: List[BenchCmp]) -> None:
        print("Results:")
        render(sys.stdout, cmps)

    def close(self) -> None:
        return None


def new_local_env(settings: EnvironmentSettings, path: str = ".") -> Local:
    try:
        repo = git.Repo(path, search_parent_directories=True)
    except GitError as e:
        raise EnvironmentSetupError(f"opening repository at {path}: {e}") from e

    logger.info("[Local Mode]")
    logger.info("Benchmarking current version", compare_target=settings.compare_target)
    logger.info("Benchmark func regex", bench_func=settings.bench_func)
    return Local(settings, repo)


class GitHub:
    """A shallow clone of a pull request branch, reporting as PR comments."""

    def __init__(self, settings: EnvironmentSettings, repo: git.Repo, client: GitHubClient):
        self.settings = settings
        self._repo = repo
        self.client = client

    @property
    def bench_func(self) -> str:
        return self.settings.bench_func

    @property
    def compare_target(self) -> str:
        return self.settings.compare_target

    @property
    def repo(self) -> git.Repo:
        return self._repo

    def post_err(self, err: str) -> None:
        try:
            self.client.post_comment(f"{err}. Logs: {self.settings.log_link}")
        except GitHubAPIError as e:
            raise GitHubAPIError(f"posting err: {e}", e.status_code, e.body) from e

    def post_results(self, cmps: List[BenchCmp]) -> None:
        buf = io.StringIO()
        render(buf, cmps)
        self.client.post_comment(format_comment_to_md(buf.getvalue()))

    def close(self) -> None:
        self.client.close()


def new_github_env(settings: EnvironmentSettings, client: GitHubClient, workspace: str) -> GitHub:
    """
    Clone ``client.owner/client.repo`` into ``workspace`` and check out the PR.

    The process's working directory is changed to the clone, so later
    benchmark runs operate on the pull request's code.
    """
    clone_dir = os.path.join(workspace, client.repo)
    url = f"https://github.com/{client.owner}/{client.repo}.git"

    try:
        repo = git.Repo.clone_from(url, clone_dir, depth=1)
    except GitError as e:
        raise EnvironmentSetupError(f"git clone: {e}") from e

    try:
        os.chdir(clone_dir)
    except OSError as e:
        raise EnvironmentSetupError(f"changing to {clone_dir} dir: {e}") from e

    refspec = f"+refs/pull/{client.pr_number}/head:refs/heads/{PULL_REQUEST_BRANCH}"
    try:
        repo.remotes.origin.fetch(refspec)
    except GitError as e:
        raise EnvironmentSetupError(f"fetch to pull request branch failed: {e}") from e

    try:
        repo.git.checkout(PULL_REQUEST_BRANCH)
    except GitError as e:
        raise EnvironmentSetupError(f"switch to pull request branch failed: {e}") from e

    logger.info("[GitHub Mode]", owner=client.owner, repo=client.repo)
    logger.info(
        "Benchmarking PR",
        pr=client.pr_number,
        compare_target=settings.compare_target,
    )
    logger.info("Benchmark func regex", bench_func=settings.bench_func)
    return GitHub(settings, repo, client)

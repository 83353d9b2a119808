"""
Main application entry point for funcbench.

Local mode benchmarks the working copy against ``target`` and prints the
comparison. GitHub mode (``--github-pr``) clones the pull request, runs the
same comparison and posts it as a PR comment.
"""

import argparse
import os
import sys
from typing import List, Optional

import structlog

from .bench import Benchmarker
from .config import FuncbenchConfig, config
from .env import Environment, EnvironmentSettings, new_github_env, new_local_env
from .errors import FuncbenchError
from .github import GitHubClient
from .logging_setup import configure_logging


logger = structlog.get_logger(__name__)


def build_parser(cfg: FuncbenchConfig) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=os.path.basename(sys.argv[0]),
        description="Benchmark and compare your Go code between commits or sub benchmarks.",
    )
    parser.add_argument(
        "target",
        help="Tag name, branch name or commit SHA to compare the current version against.",
    )
    parser.add_argument(
        "bench_func_regex",
        nargs="?",
        default=".",
        help="Function regex to use for benchmark (default: all benchmarks).",
    )
    parser.add_argument("-v", "--verbose", action="store_true", default=cfg.verbose,
                        help="Verbose mode, benchmark command output is logged.")
    parser.add_argument("--owner", default=cfg.owner,
                        help="A GitHub owner or organisation name (default: %(default)s)")
    parser.add_argument("--repo", default=cfg.repo,
                        help="The repository name (default: %(default)s)")
    parser.add_argument("--github-pr", type=int, default=cfg.github_pr,
                        help="GitHub PR number to pull changes from and to post benchmark results.")
    parser.add_argument("--workspace", default=cfg.workspace,
                        help="Directory to clone the GitHub PR into (default: %(default)s)")
    parser.add_argument("--result-cache", default=cfg.result_cache,
                        help="Directory to store benchmark results (default: %(default)s)")
    parser.add_argument("-t", "--bench-time", default=cfg.bench_time,
                        help="go test -benchtime value (default: %(default)s)")
    parser.add_argument("-d", "--timeout", default=cfg.timeout,
                        help="go test -timeout value, 0 disables it (default: %(default)s)")
    parser.add_argument("--package-path", default=cfg.package_path,
                        help="Go package path to benchmark (default: %(default)s)")
    parser.add_argument("--log-link", default=cfg.log_link,
                        help="Link to execution logs, appended to error comments.")
    return parser


def new_environment(cfg: FuncbenchConfig, settings: EnvironmentSettings) -> Environment:
    """Build the Local or GitHub environment selected by ``cfg``."""
    if not cfg.github_mode:
        return new_local_env(settings)

    client = GitHubClient.from_config(cfg)
    try:
        return new_github_env(settings, client, cfg.workspace)
    except FuncbenchError as e:
        try:
            client.post_comment(f"{e}. Could not setup environment, please check logs.")
        finally:
            client.close()
        raise


def run(cfg: FuncbenchConfig) -> int:
    """Benchmark, compare and report; returns the process exit code."""
    settings = EnvironmentSettings(
        bench_func=cfg.bench_func_regex,
        compare_target=cfg.compare_target,
        log_link=cfg.log_link,
    )
    try:
        env = new_environment(cfg, settings)
    except FuncbenchError as e:
        logger.error("Failed to set up environment", error=str(e))
        return 1

    benchmarker = Benchmarker(
        result_cache=cfg.result_cache,
        bench_time=cfg.bench_time,
        timeout=cfg.timeout,
        package_path=cfg.package_path,
    )
    try:
        try:
            cmps = benchmarker.compare_to_target(env)
        except FuncbenchError as e:
            logger.error("Benchmark comparison failed", error=str(e))
            env.post_err(str(e))
            return 1

        env.post_results(cmps)
        return 0
    finally:
        env.close()


def cli(argv: Optional[List[str]] = None) -> None:
    """Command-line interface entry point."""
    args = build_parser(config).parse_args(argv)

    # Update config with command-line arguments
    config.verbose = args.verbose
    config.owner = args.owner
    config.repo = args.repo
    config.github_pr = args.github_pr
    config.workspace = args.workspace
    config.result_cache = args.result_cache
    config.bench_time = args.bench_time
    config.timeout = args.timeout
    config.package_path = args.package_path
    config.log_link = args.log_link
    config.compare_target = args.target
    config.bench_func_regex = args.bench_func_regex

    configure_logging(config.verbose)

    try:
        code = run(config)
    except FuncbenchError as e:
        logger.error("funcbench failed", error=str(e))
        code = 1
    sys.exit(code)


if __name__ == "__main__":
    cli()

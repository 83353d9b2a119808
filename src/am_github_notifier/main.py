"""
Main application entry point for the Alertmanager GitHub notifier.

Example command::

    am-github-notifier --org=prometheus --repo=prometheus --port=8080
"""

import argparse
import os
import sys
from typing import List, Optional

import structlog
import uvicorn

from . import webhook as webhook_module
from .config import NotifierConfig, config, load_token
from .errors import ConfigurationError
from .logging_setup import configure_logging
from .receiver import new_gh_webhook_receiver


logger = structlog.get_logger(__name__)


def build_parser(cfg: NotifierConfig) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=os.path.basename(sys.argv[0]),
        description="alertmanager github webhook receiver",
    )
    parser.add_argument(
        "--authfile",
        default=cfg.auth_file,
        help="path to github oauth token file (default: %(default)s)",
    )
    parser.add_argument(
        "--org",
        default=cfg.default_owner or None,
        required=not cfg.default_owner,
        help="default org/owner",
    )
    parser.add_argument(
        "--repo",
        default=cfg.default_repo or None,
        required=not cfg.default_repo,
        help="default repo",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=cfg.port,
        help="port number to run the server in (default: %(default)s)",
    )
    parser.add_argument(
        "--host",
        default=cfg.host,
        help="host to bind the server to (default: %(default)s)",
    )
    parser.add_argument(
        "--dryrun",
        action="store_true",
        default=cfg.dry_run,
        help="dry run for github api",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=cfg.log_level.upper(),
        help="Log level (default: %(default)s)",
    )
    return parser


def cli(argv: Optional[List[str]] = None) -> None:
    """Command-line interface entry point."""
    args = build_parser(config).parse_args(argv)

    # Update config with command-line arguments
    config.auth_file = args.authfile
    config.default_owner = args.org
    config.default_repo = args.repo
    config.port = args.port
    config.host = args.host
    config.dry_run = args.dryrun
    config.log_level = args.log_level

    configure_logging(config.log_level)

    try:
        token = None if config.dry_run else load_token(config.auth_file)
    except ConfigurationError as e:
        logger.error("Failed to create GitHub webhook receiver client", error=str(e))
        sys.exit(1)

    webhook_module.receiver = new_gh_webhook_receiver(config, token)
    logger.info(
        "Finished setting up GitHub client, starting am-github-notifier",
        default_owner=config.default_owner,
        default_repo=config.default_repo,
        dry_run=config.dry_run,
        port=config.port,
    )

    uvicorn.run(
        webhook_module.app,
        host=config.host,
        port=config.port,
        log_level=config.log_level.lower(),
    )


if __name__ == "__main__":
    cli()

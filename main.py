"""
Entry point for the Alertmanager GitHub notifier.

This module provides the main entry point that delegates to the package's CLI.
"""

from src.am_github_notifier.main import cli

if __name__ == "__main__":
    cli()

"""
Alertmanager GitHub Notifier

Receives Prometheus AlertManager webhooks and posts one GitHub issue comment
per alert on the pull request named by the alert's ``prNum`` label.
"""

__version__ = "0.1.0"
__description__ = "Alertmanager webhook receiver that comments on GitHub pull requests"

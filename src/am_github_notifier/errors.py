"""Exception hierarchy for the Alertmanager GitHub notifier."""

from typing import Optional


class NotifierError(Exception):
    """Base class for notifier errors."""


class ConfigurationError(NotifierError):
    """Raised when required startup configuration is missing or unreadable."""


class LabelError(NotifierError):
    """Raised when an alert does not carry a usable target label."""

    def __init__(self, label: str, message: str):
        self.label = label
        super().__init__(message)


class MissingLabelError(LabelError):
    """The label is absent from the alert."""

    def __init__(self, label: str):
        super().__init__(label, f"{label} label not found in alert")


class InvalidLabelError(LabelError):
    """The label is present but its value cannot be used."""

    def __init__(self, label: str, value: str):
        self.value = value
        super().__init__(label, f"invalid {label} label value {value!r}: not an integer")


class GitHubAPIError(NotifierError):
    """Raised when a GitHub API call fails."""

    def __init__(self, message: str, status_code: Optional[int] = None, body: str = ""):
        self.status_code = status_code
        self.body = body
        super().__init__(message)

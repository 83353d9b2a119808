"""
Pydantic models for AlertManager webhook payloads.

Only ``alerts`` is needed for comment posting; the remaining fields of the
AlertManager payload are accepted and kept for logging.
"""

from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, Field


class AlertStatus(str, Enum):
    """Alert status enumeration."""
    FIRING = "firing"
    RESOLVED = "resolved"


class AlertLabel(BaseModel):
    """Alert labels from Prometheus."""
    alertname: Optional[str] = Field(None, description="Name of the alert")
    prNum: Optional[str] = Field(None, description="Target pull request number")
    owner: Optional[str] = Field(None, description="Target GitHub owner/org")
    repo: Optional[str] = Field(None, description="Target GitHub repository")
    severity: Optional[str] = Field(None, description="Alert severity")

    class Config:
        extra = "allow"  # Allow additional labels


class AlertAnnotation(BaseModel):
    """Alert annotations from Prometheus."""
    summary: Optional[str] = Field(None, description="Alert summary")
    description: Optional[str] = Field(None, description="Alert description")
    runbook_url: Optional[str] = Field(None, description="Runbook URL")

    class Config:
        extra = "allow"  # Allow additional annotations


class Alert(BaseModel):
    """Individual alert from AlertManager."""
    status: AlertStatus = Field(AlertStatus.FIRING, description="Alert status")
    labels: AlertLabel = Field(default_factory=AlertLabel, description="Alert labels")
    annotations: AlertAnnotation = Field(default_factory=AlertAnnotation, description="Alert annotations")
    startsAt: Optional[datetime] = Field(None, description="Alert start time")
    endsAt: Optional[datetime] = Field(None, description="Alert end time")
    generatorURL: Optional[str] = Field(None, description="Generator URL")
    fingerprint: Optional[str] = Field(None, description="Alert fingerprint")


class AlertManagerWebhook(BaseModel):
    """AlertManager webhook payload."""
    version: str = Field("4", description="AlertManager version")
    groupKey: str = Field("", description="Group key")
    truncatedAlerts: int = Field(default=0, description="Number of truncated alerts")
    status: AlertStatus = Field(AlertStatus.FIRING, description="Group status")
    receiver: str = Field("", description="Receiver name")
    groupLabels: Dict[str, str] = Field(default_factory=dict, description="Group labels")
    commonLabels: Dict[str, str] = Field(default_factory=dict, description="Common labels")
    commonAnnotations: Dict[str, str] = Field(default_factory=dict, description="Common annotations")
    externalURL: str = Field("", description="AlertManager external URL")
    alerts: List[Alert] = Field(default_factory=list, description="List of alerts")


def alert_id(webhook: AlertManagerWebhook) -> str:
    """Identify a webhook message in logs by its hex-encoded group key."""
    return "0x" + webhook.groupKey.encode("utf-8").hex()

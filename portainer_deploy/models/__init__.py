"""Data models for portainer-deploy."""

from portainer_deploy.models.deployment import (
    ChangeSet,
    DeployConfig,
    DeployResult,
    DeploySummary,
    WebhookResponse,
)

__all__ = [
    "ChangeSet",
    "DeployConfig",
    "DeployResult",
    "DeploySummary",
    "WebhookResponse",
]

"""Core functionality for portainer-deploy."""

from portainer_deploy.core.changes import ChangeDetector
from portainer_deploy.core.exceptions import (
    DeployerError,
    HttpFailureError,
    InvalidWebhookSchemeError,
    MalformedWebhookURLError,
    MissingSecretError,
    UndeterminedChangeSetError,
    WebhookDispatchError,
    WebhookNetworkError,
    WebhookTimeoutError,
)
from portainer_deploy.core.secrets import resolve_webhook, secret_key_for
from portainer_deploy.core.service_names import extract_service_names, ordered_service_names

__all__ = [
    "ChangeDetector",
    "DeployerError",
    "HttpFailureError",
    "InvalidWebhookSchemeError",
    "MalformedWebhookURLError",
    "MissingSecretError",
    "UndeterminedChangeSetError",
    "WebhookDispatchError",
    "WebhookNetworkError",
    "WebhookTimeoutError",
    "resolve_webhook",
    "secret_key_for",
    "extract_service_names",
    "ordered_service_names",
]

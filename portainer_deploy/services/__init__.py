"""External service clients for portainer-deploy."""

from portainer_deploy.services.webhook_service import WebhookService

__all__ = [
    "WebhookService",
]

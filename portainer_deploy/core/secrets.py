"""Webhook URL resolution from secrets exposed as environment variables."""

import os
from typing import Mapping

from portainer_deploy.core.exceptions import InvalidWebhookSchemeError, MissingSecretError

DEFAULT_SECRET_PREFIX = "PORTAINER_WEBHOOK_"


def secret_key_for(service: str, prefix: str = DEFAULT_SECRET_PREFIX) -> str:
    """Environment variable holding the webhook URL for ``service``.

    >>> secret_key_for("home-assistant")
    'PORTAINER_WEBHOOK_HOME_ASSISTANT'
    """
    return f"{prefix}{service.replace('-', '_').upper()}"


def resolve_webhook(
    service: str,
    prefix: str = DEFAULT_SECRET_PREFIX,
    environ: Mapping[str, str] | None = None,
) -> str:
    """Look up the webhook URL for ``service``.

    Raises:
        MissingSecretError: If the variable is unset or empty.
        InvalidWebhookSchemeError: If the URL is not HTTPS.
    """
    environ = os.environ if environ is None else environ
    secret_key = secret_key_for(service, prefix)

    url = environ.get(secret_key, "")
    if not url:
        raise MissingSecretError(service, secret_key)
    if not url.startswith("https://"):
        raise InvalidWebhookSchemeError(service, secret_key)
    return url

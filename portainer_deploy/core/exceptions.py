"""Custom exceptions for portainer-deploy.

None of these messages may contain a webhook URL, a secret value or an
upstream response body.
"""

from typing import Any


class DeployerError(Exception):
    """Base exception for portainer-deploy."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class UndeterminedChangeSetError(DeployerError):
    """The set of changed files could not be computed."""

    def __init__(self, reason: str):
        super().__init__(f"Cannot determine changed files: {reason}", {"reason": reason})
        self.reason = reason


class MissingSecretError(DeployerError):
    """No webhook URL is configured for a service."""

    def __init__(self, service: str, secret_key: str):
        super().__init__(
            f"Secret {secret_key} not found for service '{service}'.\n"
            f"1. Enable the webhook in Portainer for the '{service}' stack\n"
            f"2. Copy the webhook URL from Portainer\n"
            f"3. Add it to the repository secrets with name: {secret_key}\n"
            f"4. Pass {secret_key} to the deploy step as an environment variable",
            {"service": service, "secret_key": secret_key},
        )
        self.service = service
        self.secret_key = secret_key


class InvalidWebhookSchemeError(DeployerError):
    """The configured webhook URL is not HTTPS."""

    def __init__(self, service: str, secret_key: str):
        super().__init__(
            f"Invalid webhook URL for {service} ({secret_key}). Must be HTTPS.",
            {"service": service, "secret_key": secret_key},
        )
        self.service = service
        self.secret_key = secret_key


class MalformedWebhookURLError(DeployerError):
    """The configured webhook URL cannot be parsed or requested."""

    def __init__(self, service: str, secret_key: str):
        super().__init__(
            f"Malformed webhook URL for {service} ({secret_key}). Check the secret value.",
            {"service": service, "secret_key": secret_key},
        )
        self.service = service
        self.secret_key = secret_key


class WebhookDispatchError(DeployerError):
    """The webhook could not be triggered after all attempts."""

    def __init__(self, message: str, service: str, attempts: int, details: dict[str, Any] | None = None):
        super().__init__(
            message,
            {"service": service, "attempts": attempts, **(details or {})},
        )
        self.service = service
        self.attempts = attempts


class HttpFailureError(WebhookDispatchError):
    """The endpoint kept answering with a non-success status."""

    def __init__(self, service: str, status_code: int, attempts: int):
        super().__init__(
            f"Webhook failed for {service}: HTTP {status_code} after {attempts} attempt(s)",
            service,
            attempts,
            {"status_code": status_code},
        )
        self.status_code = status_code


class WebhookNetworkError(WebhookDispatchError):
    """The endpoint could not be reached."""

    def __init__(self, service: str, attempts: int, error_type: str):
        super().__init__(
            f"Network error for {service} after {attempts} attempt(s): {error_type}",
            service,
            attempts,
            {"error_type": error_type},
        )
        self.error_type = error_type


class WebhookTimeoutError(WebhookDispatchError):
    """The endpoint did not answer within the request timeout."""

    def __init__(self, service: str, attempts: int, timeout: float):
        super().__init__(
            f"Timeout for {service} after {attempts} attempt(s) ({timeout:g}s per request)",
            service,
            attempts,
            {"timeout": timeout},
        )
        self.timeout = timeout

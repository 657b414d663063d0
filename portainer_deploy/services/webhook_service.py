"""Webhook dispatch with bounded retries."""

import asyncio
from typing import Awaitable, Callable

import httpx

from portainer_deploy.core.exceptions import (
    HttpFailureError,
    MalformedWebhookURLError,
    WebhookNetworkError,
    WebhookTimeoutError,
)
from portainer_deploy.core.secrets import secret_key_for
from portainer_deploy.models.deployment import DeployConfig, WebhookResponse
from portainer_deploy.utils.logging import get_logger

logger = get_logger("webhook_service")

SUCCESS_STATUS_CODES = frozenset({200, 204})

Sleep = Callable[[float], Awaitable[None]]


class WebhookService:
    """Triggers Portainer stack webhooks.

    Every request is a body-less POST. Non-200/204 responses, transport errors
    and timeouts are retried up to ``config.max_attempts`` times with a fixed
    delay between attempts. Response bodies are never read into logs or errors,
    and only the host of the webhook URL is logged.
    """

    def __init__(
        self,
        config: DeployConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        sleep: Sleep | None = None,
    ):
        self.config = config or DeployConfig()
        self.transport = transport
        self.sleep = sleep or asyncio.sleep

    def build_headers(self) -> dict[str, str]:
        """Request headers, including access-gateway credentials if configured."""
        headers = {"User-Agent": self.config.user_agent}
        if self.config.access_client_id or self.config.access_client_secret:
            headers["CF-Access-Client-Id"] = self.config.access_client_id
            headers["CF-Access-Client-Secret"] = self.config.access_client_secret
        return headers

    def build_params(self) -> dict[str, str] | None:
        """Query parameters merged into the webhook URL."""
        if self.config.redeploy_action:
            return {"action": "redeploy"}
        return None

    async def trigger(self, url: str, service: str) -> WebhookResponse:
        """Trigger the webhook for ``service``.

        Returns:
            The successful response status and the number of attempts used.

        Raises:
            HttpFailureError: The last attempt returned a non-success status.
            WebhookNetworkError: The last attempt failed at the transport level.
            WebhookTimeoutError: The last attempt timed out.
            MalformedWebhookURLError: The URL cannot be parsed or requested.
        """
        max_attempts = self.config.max_attempts
        try:
            request_url = httpx.URL(url)
        except httpx.InvalidURL:
            raise self._malformed(service) from None

        target = request_url.host
        log = logger.bind(service=service, target=target, max_attempts=max_attempts)

        async with httpx.AsyncClient(
            transport=self.transport,
            timeout=httpx.Timeout(self.config.request_timeout),
            headers=self.build_headers(),
        ) as client:
            for attempt in range(1, max_attempts + 1):
                if attempt > 1:
                    log.info("webhook.retry_wait", delay=self.config.retry_delay, next_attempt=attempt)
                    await self.sleep(self.config.retry_delay)

                log.info("webhook.attempt.started", attempt=attempt)
                final = attempt == max_attempts

                try:
                    response = await client.post(request_url, params=self.build_params())
                except (httpx.InvalidURL, httpx.UnsupportedProtocol):
                    log.error("webhook.attempt.malformed_url", attempt=attempt)
                    raise self._malformed(service) from None
                except httpx.TimeoutException:
                    log.warning("webhook.attempt.timeout", attempt=attempt, timeout=self.config.request_timeout)
                    if final:
                        raise WebhookTimeoutError(service, attempt, self.config.request_timeout)
                    continue
                except httpx.TransportError as e:
                    error_type = type(e).__name__
                    log.warning("webhook.attempt.network_error", attempt=attempt, error_type=error_type)
                    if final:
                        raise WebhookNetworkError(service, attempt, error_type)
                    continue

                if response.status_code in SUCCESS_STATUS_CODES:
                    log.info("webhook.attempt.succeeded", attempt=attempt, status_code=response.status_code)
                    return WebhookResponse(status_code=response.status_code, attempts=attempt)

                log.warning("webhook.attempt.failed", attempt=attempt, status_code=response.status_code)
                if final:
                    raise HttpFailureError(service, response.status_code, attempt)

        # max_attempts >= 1, so the loop always returns or raises
        raise AssertionError("unreachable")

    def _malformed(self, service: str) -> MalformedWebhookURLError:
        return MalformedWebhookURLError(service, secret_key_for(service, self.config.secret_prefix))

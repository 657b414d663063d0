"""Deploy Orchestrator.

Coordinates change detection, service name extraction, secret resolution and
webhook dispatch for a single push.
"""

import os
from typing import Mapping

from portainer_deploy.config import get_settings
from portainer_deploy.core.changes import ChangeDetector
from portainer_deploy.core.exceptions import DeployerError
from portainer_deploy.core.secrets import resolve_webhook
from portainer_deploy.core.service_names import ordered_service_names
from portainer_deploy.models.deployment import DeployConfig, DeployResult, DeploySummary
from portainer_deploy.services.webhook_service import WebhookService
from portainer_deploy.utils.logging import get_logger


class DeployOrchestrator:
    """Redeploys every service whose compose file changed.

    Run phases:
    1. change detection - skip the run if the change set is undetermined
    2. service extraction - nothing to do if no compose file changed
    3. deployment - resolve and trigger each webhook, one service at a time
    """

    def __init__(
        self,
        config: DeployConfig | None = None,
        detector: ChangeDetector | None = None,
        webhook_service: WebhookService | None = None,
        environ: Mapping[str, str] | None = None,
    ):
        self.config = config or get_settings().deploy_config()
        self.detector = detector or self._default_detector()
        self.webhook_service = webhook_service or WebhookService(self.config)
        self.environ = os.environ if environ is None else environ
        self.logger = get_logger("orchestrator")

    @staticmethod
    def _default_detector() -> ChangeDetector:
        settings = get_settings()
        return ChangeDetector(
            repo_path=settings.git_repo_path,
            base_ref=settings.git_base_ref,
            head_ref=settings.git_head_ref,
            changed_files=settings.changed_files,
        )

    async def run(self) -> DeploySummary:
        """Run the deployment and summarize it.

        Never raises: an unexpected error is reported as a failed summary.
        """
        try:
            summary = await self._run()
        except Exception as e:
            self.logger.exception("orchestrator.failed", error=str(e))
            return DeploySummary(success=False, error=str(e))

        self._log_summary(summary)
        return summary

    async def _run(self) -> DeploySummary:
        change_set = self.detector.detect()

        if change_set.is_undetermined:
            self.logger.warning(
                "orchestrator.skipped",
                reason=change_set.reason,
                hint="normal pushes with linear history are detected correctly",
            )
            return DeploySummary(
                success=True,
                skipped=True,
                reason=f"Cannot determine changed files: {change_set.reason}",
            )

        paths = change_set.paths or []
        services = ordered_service_names(paths, self.config)
        self.logger.info(
            "orchestrator.services_detected",
            changed_files=len(paths),
            source=change_set.source,
            services=services,
        )

        if not services:
            self.logger.info("orchestrator.nothing_to_deploy")
            return DeploySummary(success=True)

        results = []
        for service in services:
            results.append(await self._deploy_service(service))

        return DeploySummary.from_results(results)

    async def _deploy_service(self, service: str) -> DeployResult:
        """Deploy one service, converting its failure into a result."""
        self.logger.info("orchestrator.deploy.started", service=service)

        try:
            url = resolve_webhook(service, self.config.secret_prefix, self.environ)
            response = await self.webhook_service.trigger(url, service)
        except DeployerError as e:
            self.logger.error("orchestrator.deploy.failed", service=service, error=e.message)
            return DeployResult(
                service=service,
                success=False,
                error=e.message,
                attempts=e.details.get("attempts", 0),
                status_code=e.details.get("status_code"),
            )

        self.logger.info(
            "orchestrator.deploy.completed",
            service=service,
            status_code=response.status_code,
            attempts=response.attempts,
        )
        return DeployResult(
            service=service,
            success=True,
            attempts=response.attempts,
            status_code=response.status_code,
        )

    def _log_summary(self, summary: DeploySummary) -> None:
        if summary.skipped:
            return

        self.logger.info(
            "orchestrator.summary",
            success=summary.success,
            deployed=summary.deployed,
            failed=summary.failed,
        )
        for result in summary.results:
            if not result.success:
                self.logger.error("orchestrator.summary.error", service=result.service, error=result.error)

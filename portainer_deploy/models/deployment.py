"""Deployment data models."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class DeployConfig(BaseModel):
    """Immutable configuration for a deploy run."""

    model_config = ConfigDict(frozen=True)

    services_path: str = "services"
    compose_file_name: str = "compose.yaml"
    secret_prefix: str = "PORTAINER_WEBHOOK_"

    max_attempts: int = Field(default=3, ge=1)
    retry_delay: float = Field(default=5.0, ge=0)
    request_timeout: float = Field(default=10.0, gt=0)
    redeploy_action: bool = True

    user_agent: str = "GitHub Actions (Portainer Deploy)"
    access_client_id: str = ""
    access_client_secret: str = ""


class ChangeSet(BaseModel):
    """Files changed by the pushed commit.

    ``paths`` is ``None`` when the change set could not be determined, which is
    different from a known-empty change set.
    """

    paths: list[str] | None = None
    source: Literal["git", "env"] = "git"
    reason: str | None = None

    @classmethod
    def undetermined(cls, reason: str) -> "ChangeSet":
        return cls(paths=None, source="git", reason=reason)

    @property
    def is_undetermined(self) -> bool:
        return self.paths is None


class WebhookResponse(BaseModel):
    """Successful webhook dispatch."""

    status_code: int
    attempts: int


class DeployResult(BaseModel):
    """Outcome of deploying a single service."""

    service: str
    success: bool
    error: str | None = None

    attempts: int = 0
    status_code: int | None = None


class DeploySummary(BaseModel):
    """Aggregate outcome of a deploy run."""

    success: bool
    skipped: bool = False
    reason: str | None = None

    deployed: list[str] = Field(default_factory=list)
    failed: list[str] = Field(default_factory=list)
    results: list[DeployResult] = Field(default_factory=list)

    error: str | None = None

    @classmethod
    def from_results(cls, results: list[DeployResult]) -> "DeploySummary":
        """Aggregate per-service results."""
        deployed = [r.service for r in results if r.success]
        failed = [r.service for r in results if not r.success]
        return cls(
            success=not failed,
            deployed=deployed,
            failed=failed,
            results=results,
        )

    @property
    def exit_code(self) -> int:
        """Process exit code for this summary."""
        return 0 if self.success else 1

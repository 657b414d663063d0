"""Application configuration using pydantic-settings."""

from functools import lru_cache
from typing import Literal

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from portainer_deploy.models.deployment import DeployConfig

# Webhook secrets are read straight from os.environ, so a local .env has to be
# loaded into the process. Variables provided by CI take precedence.
load_dotenv(override=False)


class Settings(BaseSettings):
    """Deployer settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Repository layout
    services_path: str = "services"
    compose_file_name: str = "compose.yaml"

    # Change detection
    changed_files: str | None = None  # whitespace-delimited, bypasses git
    git_repo_path: str = "."
    git_base_ref: str = "HEAD~1"
    git_head_ref: str = "HEAD"

    # Webhook dispatch
    webhook_secret_prefix: str = "PORTAINER_WEBHOOK_"
    webhook_max_attempts: int = Field(default=3, ge=1)
    webhook_retry_delay: float = Field(default=5.0, ge=0)
    webhook_timeout: float = Field(default=10.0, gt=0)
    webhook_redeploy_action: bool = True
    webhook_user_agent: str = "GitHub Actions (Portainer Deploy)"

    # Access gateway pass-through (e.g. Cloudflare Access service token)
    cf_access_client_id: str = Field(default="")
    cf_access_client_secret: str = Field(default="")

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: Literal["console", "json"] = "console"

    def deploy_config(self) -> DeployConfig:
        """Build the immutable configuration handed to the orchestrator."""
        return DeployConfig(
            services_path=self.services_path,
            compose_file_name=self.compose_file_name,
            secret_prefix=self.webhook_secret_prefix,
            max_attempts=self.webhook_max_attempts,
            retry_delay=self.webhook_retry_delay,
            request_timeout=self.webhook_timeout,
            redeploy_action=self.webhook_redeploy_action,
            user_agent=self.webhook_user_agent,
            access_client_id=self.cf_access_client_id,
            access_client_secret=self.cf_access_client_secret,
        )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()

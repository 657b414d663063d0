"""Command-line entry point."""

import asyncio

import click

from portainer_deploy import __version__
from portainer_deploy.config import get_settings
from portainer_deploy.core.changes import ChangeDetector
from portainer_deploy.core.orchestrator import DeployOrchestrator
from portainer_deploy.core.secrets import secret_key_for
from portainer_deploy.core.service_names import ordered_service_names
from portainer_deploy.models.deployment import DeploySummary
from portainer_deploy.utils.logging import configure_logging


@click.group()
@click.version_option(__version__, prog_name="portainer-deploy")
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default=None,
    help="Log level (defaults to LOG_LEVEL)",
)
@click.option(
    "--log-format",
    type=click.Choice(["console", "json"]),
    default=None,
    help="Log renderer (defaults to LOG_FORMAT)",
)
def cli(log_level: str | None, log_format: str | None):
    """Redeploy Portainer stacks whose compose file changed in the last commit."""
    configure_logging(level=log_level.upper() if log_level else None, log_format=log_format)


@cli.command()
@click.option(
    "--changed-files",
    default=None,
    help="Whitespace-delimited changed paths; skips git (defaults to CHANGED_FILES)",
)
@click.option(
    "--repo",
    "repo_path",
    type=click.Path(exists=True, file_okay=False),
    default=None,
    help="Git repository to inspect (defaults to GIT_REPO_PATH)",
)
@click.option(
    "--redeploy-action/--no-redeploy-action",
    default=None,
    help="Append ?action=redeploy to webhook URLs",
)
@click.option("--retry-delay", type=click.FloatRange(min=0), default=None, help="Seconds between attempts")
@click.option("--max-attempts", type=click.IntRange(min=1), default=None, help="Attempts per service")
@click.option("--json", "as_json", is_flag=True, help="Print the summary as JSON")
@click.pass_context
def deploy(
    ctx: click.Context,
    changed_files: str | None,
    repo_path: str | None,
    redeploy_action: bool | None,
    retry_delay: float | None,
    max_attempts: int | None,
    as_json: bool,
):
    """Trigger webhooks for every changed service."""
    settings = get_settings()

    overrides = {
        "redeploy_action": redeploy_action,
        "retry_delay": retry_delay,
        "max_attempts": max_attempts,
    }
    config = settings.deploy_config().model_copy(
        update={key: value for key, value in overrides.items() if value is not None}
    )
    detector = ChangeDetector(
        repo_path=repo_path or settings.git_repo_path,
        base_ref=settings.git_base_ref,
        head_ref=settings.git_head_ref,
        changed_files=changed_files if changed_files is not None else settings.changed_files,
    )

    summary = asyncio.run(DeployOrchestrator(config=config, detector=detector).run())

    if as_json:
        click.echo(summary.model_dump_json(indent=2))
    else:
        _echo_summary(summary)

    ctx.exit(summary.exit_code)


@cli.command()
@click.argument("paths", nargs=-1)
def services(paths: tuple[str, ...]):
    """Print the services matched by PATHS, one per line."""
    config = get_settings().deploy_config()
    for name in ordered_service_names(paths, config):
        click.echo(name)


@cli.command("secret-name")
@click.argument("service")
def secret_name(service: str):
    """Print the environment variable holding SERVICE's webhook URL."""
    click.echo(secret_key_for(service, get_settings().webhook_secret_prefix))


def _echo_summary(summary: DeploySummary) -> None:
    if summary.error:
        click.echo(f"Fatal error: {summary.error}", err=True)
        return
    if summary.skipped:
        click.echo(f"Skipped: {summary.reason}")
        return
    if not summary.results:
        click.echo("No services needed deployment.")
        return

    if summary.deployed:
        click.echo(f"Successful: {', '.join(summary.deployed)}")
    if summary.failed:
        click.echo(f"Failed: {', '.join(summary.failed)}")
        for result in summary.results:
            if not result.success:
                click.echo(f"  - {result.service}: {result.error}")
    click.echo("All deployments successful." if summary.success else "Some deployments failed.")


if __name__ == "__main__":
    cli()

"""Pytest configuration and fixtures."""

import logging
import subprocess
from pathlib import Path
from typing import Callable

import httpx
import pytest

from portainer_deploy.config import get_settings
from portainer_deploy.models.deployment import DeployConfig


class RecordingSleep:
    """Stand-in for asyncio.sleep that records requested delays."""

    def __init__(self):
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


class FakeGit:
    """Scripted git runner keyed by subcommand."""

    def __init__(self, responses: dict[str, tuple[int, str]]):
        self.responses = responses
        self.calls: list[list[str]] = []

    def __call__(self, args: list[str], cwd: Path) -> "subprocess.CompletedProcess[str]":
        self.calls.append(args)
        returncode, stdout = self.responses[args[0]]
        return subprocess.CompletedProcess(["git", *args], returncode, stdout, "")


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch: pytest.MonkeyPatch):
    """Keep host CI variables and cached settings out of the tests."""
    for name in (
        "CHANGED_FILES",
        "CF_ACCESS_CLIENT_ID",
        "CF_ACCESS_CLIENT_SECRET",
        "WEBHOOK_SECRET_PREFIX",
        "WEBHOOK_MAX_ATTEMPTS",
        "WEBHOOK_RETRY_DELAY",
        "WEBHOOK_REDEPLOY_ACTION",
        "SERVICES_PATH",
        "COMPOSE_FILE_NAME",
    ):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
    # CliRunner closes the stream the CLI attached its log handler to
    logging.getLogger().handlers.clear()


@pytest.fixture
def recording_sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def deploy_config() -> DeployConfig:
    """Default configuration with a short request timeout."""
    return DeployConfig(request_timeout=1.0)


@pytest.fixture
def sequence_transport() -> Callable[..., httpx.MockTransport]:
    """Build a transport replaying one outcome per request.

    Each outcome is a status code or an exception instance to raise. The last
    outcome repeats once the sequence is exhausted. Requests are recorded on
    ``transport.requests``.
    """

    def factory(*outcomes: int | Exception, body: str = "") -> httpx.MockTransport:
        requests: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            outcome = outcomes[min(len(requests), len(outcomes) - 1)]
            requests.append(request)
            if isinstance(outcome, Exception):
                raise outcome
            return httpx.Response(outcome, text=body)

        transport = httpx.MockTransport(handler)
        transport.requests = requests
        return transport

    return factory


@pytest.fixture
def fake_git() -> Callable[[dict[str, tuple[int, str]]], FakeGit]:
    """Build a scripted git runner from ``{subcommand: (returncode, stdout)}``."""
    return FakeGit

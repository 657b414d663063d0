"""Map changed files to the services whose compose file changed."""

import re
from functools import lru_cache
from typing import Iterable

from portainer_deploy.models.deployment import DeployConfig


@lru_cache
def compose_path_pattern(services_path: str = "services", compose_file_name: str = "compose.yaml") -> re.Pattern[str]:
    """Pattern matching ``<services_path>/<name>/<compose_file_name>`` exactly."""
    prefix = re.escape(services_path.strip("/"))
    filename = re.escape(compose_file_name)
    return re.compile(rf"^{prefix}/([^/]+)/{filename}$")


def ordered_service_names(paths: Iterable[str], config: DeployConfig | None = None) -> list[str]:
    """Service names in the order they first appear in ``paths``."""
    config = config or DeployConfig()
    pattern = compose_path_pattern(config.services_path, config.compose_file_name)

    names: dict[str, None] = {}
    for path in paths:
        match = pattern.match(path)
        if match:
            names.setdefault(match.group(1))
    return list(names)


def extract_service_names(paths: Iterable[str], config: DeployConfig | None = None) -> set[str]:
    """Distinct service names whose compose file appears in ``paths``.

    Paths that are not a top-level service compose file are ignored.
    """
    return set(ordered_service_names(paths, config))

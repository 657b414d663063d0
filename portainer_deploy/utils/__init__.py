"""Utility functions for portainer-deploy."""

from portainer_deploy.utils.logging import configure_logging, get_logger

__all__ = [
    "configure_logging",
    "get_logger",
]

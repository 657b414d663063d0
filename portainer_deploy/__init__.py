"""Redeploy changed Portainer stacks from CI."""

__version__ = "0.1.0"

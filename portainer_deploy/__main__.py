"""Allow ``python -m portainer_deploy``."""

from portainer_deploy.main import cli

cli(prog_name="portainer-deploy")

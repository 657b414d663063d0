"""Change detection.

Determines which files the pushed commit touched, either from an explicit
``CHANGED_FILES`` list or from ``git diff`` against the parent commit.
"""

import subprocess
from pathlib import Path
from typing import Callable

from portainer_deploy.core.exceptions import UndeterminedChangeSetError
from portainer_deploy.models.deployment import ChangeSet
from portainer_deploy.utils.logging import get_logger

logger = get_logger("changes")

GitRunner = Callable[[list[str], Path], "subprocess.CompletedProcess[str]"]


def run_git(args: list[str], cwd: Path) -> "subprocess.CompletedProcess[str]":
    """Run a git command and capture its output."""
    return subprocess.run(
        ["git", *args],
        cwd=cwd,
        capture_output=True,
        text=True,
        check=False,
    )


class ChangeDetector:
    """Computes the change set for the current push.

    When git cannot tell what changed (initial commit, shallow clone, force push,
    squash merge) the change set is reported as undetermined and nothing is
    deployed. It never falls back to scanning every compose file.
    """

    def __init__(
        self,
        repo_path: Path | str = ".",
        base_ref: str = "HEAD~1",
        head_ref: str = "HEAD",
        changed_files: str | None = None,
        runner: GitRunner | None = None,
    ):
        self.repo_path = Path(repo_path)
        self.base_ref = base_ref
        self.head_ref = head_ref
        self.changed_files = changed_files
        self.runner = runner or run_git

    def detect(self) -> ChangeSet:
        """Return the change set, never raising for undeterminable history."""
        if self.changed_files is not None:
            paths = self.changed_files.split()
            logger.info("changes.from_env", count=len(paths))
            return ChangeSet(paths=paths, source="env")

        try:
            paths = self.diff_paths()
        except UndeterminedChangeSetError as e:
            logger.warning("changes.undetermined", reason=e.reason)
            return ChangeSet.undetermined(e.reason)

        if not paths:
            logger.info("changes.empty", base=self.base_ref, head=self.head_ref)
        else:
            logger.info("changes.detected", count=len(paths))
        return ChangeSet(paths=paths, source="git")

    def diff_paths(self) -> list[str]:
        """List paths changed between the base and head refs.

        Raises:
            UndeterminedChangeSetError: If the base commit is missing or the
                diff cannot be computed.
        """
        parent = self._git("rev-parse", "--verify", "--quiet", f"{self.base_ref}^{{commit}}")
        if parent.returncode != 0 or not parent.stdout.strip():
            raise UndeterminedChangeSetError(
                f"no commit found for {self.base_ref} "
                "(initial commit or shallow clone)"
            )

        diff = self._git("diff", "--name-only", "-z", self.base_ref, self.head_ref)
        if diff.returncode != 0:
            raise UndeterminedChangeSetError(
                f"git diff {self.base_ref} {self.head_ref} exited with {diff.returncode} "
                "(force push, squash merge or other non-linear history)"
            )

        return [path for path in diff.stdout.split("\0") if path.strip()]

    def _git(self, *args: str) -> "subprocess.CompletedProcess[str]":
        try:
            return self.runner(list(args), self.repo_path)
        except OSError as e:
            raise UndeterminedChangeSetError(f"git is not available: {e}") from e

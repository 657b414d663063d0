"""Unit tests for change detection."""

import shutil
import subprocess
from pathlib import Path

import pytest

from portainer_deploy.core.changes import ChangeDetector
from portainer_deploy.core.exceptions import UndeterminedChangeSetError


class TestChangeDetector:
    """Tests for ChangeDetector with a scripted git runner."""

    def test_diff_paths(self, fake_git):
        git = fake_git(
            {
                "rev-parse": (0, "abc123\n"),
                "diff": (0, "services/hello/compose.yaml\0README.md\0"),
            }
        )
        detector = ChangeDetector(runner=git)

        change_set = detector.detect()

        assert change_set.is_undetermined is False
        assert change_set.source == "git"
        assert change_set.paths == ["services/hello/compose.yaml", "README.md"]
        assert git.calls[1] == ["diff", "--name-only", "-z", "HEAD~1", "HEAD"]

    def test_paths_with_spaces(self, fake_git):
        git = fake_git({"rev-parse": (0, "abc123\n"), "diff": (0, "docs/my notes.md\0")})
        assert ChangeDetector(runner=git).detect().paths == ["docs/my notes.md"]

    def test_empty_diff_is_definite(self, fake_git):
        """Test an empty diff is a known-empty change set."""
        git = fake_git({"rev-parse": (0, "abc123\n"), "diff": (0, "")})

        change_set = ChangeDetector(runner=git).detect()

        assert change_set.is_undetermined is False
        assert change_set.paths == []

    def test_no_parent_commit(self, fake_git):
        """Test an initial commit is undetermined and diff is never run."""
        git = fake_git({"rev-parse": (1, "")})

        change_set = ChangeDetector(runner=git).detect()

        assert change_set.is_undetermined is True
        assert change_set.paths is None
        assert "HEAD~1" in change_set.reason
        assert [call[0] for call in git.calls] == ["rev-parse"]

    def test_diff_failure(self, fake_git):
        """Test a failing diff is undetermined rather than a full scan."""
        git = fake_git({"rev-parse": (0, "abc123\n"), "diff": (128, "")})

        change_set = ChangeDetector(runner=git).detect()

        assert change_set.is_undetermined is True
        assert "non-linear" in change_set.reason

    def test_git_missing(self):
        def runner(args, cwd):
            raise FileNotFoundError(2, "No such file or directory", "git")

        with pytest.raises(UndeterminedChangeSetError):
            ChangeDetector(runner=runner).diff_paths()

        assert ChangeDetector(runner=runner).detect().is_undetermined is True

    def test_custom_refs(self, fake_git):
        git = fake_git({"rev-parse": (0, "abc\n"), "diff": (0, "a\0")})

        ChangeDetector(base_ref="origin/main", head_ref="feature", runner=git).detect()

        assert git.calls[0][-1] == "origin/main^{commit}"
        assert git.calls[1][-2:] == ["origin/main", "feature"]


class TestChangedFilesFromEnvironment:
    """Tests for the CHANGED_FILES override."""

    def test_whitespace_delimited(self, fake_git):
        git = fake_git({})
        detector = ChangeDetector(
            changed_files="services/hello/compose.yaml\n README.md\tservices/a/compose.yaml ",
            runner=git,
        )

        change_set = detector.detect()

        assert change_set.source == "env"
        assert change_set.paths == [
            "services/hello/compose.yaml",
            "README.md",
            "services/a/compose.yaml",
        ]
        assert git.calls == []

    def test_empty_string_is_definite_empty(self, fake_git):
        change_set = ChangeDetector(changed_files="  ", runner=fake_git({})).detect()

        assert change_set.is_undetermined is False
        assert change_set.paths == []


def _git(repo: Path, *args: str) -> None:
    subprocess.run(["git", *args], cwd=repo, check=True, capture_output=True)


@pytest.mark.skipif(shutil.which("git") is None, reason="git not installed")
class TestChangeDetectorWithRepository:
    """Tests against a real temporary repository."""

    @pytest.fixture
    def repo(self, tmp_path: Path) -> Path:
        _git(tmp_path, "init", "--quiet")
        _git(tmp_path, "config", "user.email", "ci@example.com")
        _git(tmp_path, "config", "user.name", "CI")
        _git(tmp_path, "config", "commit.gpgsign", "false")
        (tmp_path / "README.md").write_text("# stacks\n")
        _git(tmp_path, "add", ".")
        _git(tmp_path, "commit", "--quiet", "-m", "initial")
        return tmp_path

    def test_initial_commit_is_undetermined(self, repo: Path):
        assert ChangeDetector(repo_path=repo).detect().is_undetermined is True

    def test_second_commit(self, repo: Path):
        compose = repo / "services" / "hello" / "compose.yaml"
        compose.parent.mkdir(parents=True)
        compose.write_text("services: {}\n")
        _git(repo, "add", ".")
        _git(repo, "commit", "--quiet", "-m", "add hello")

        change_set = ChangeDetector(repo_path=repo).detect()

        assert change_set.paths == ["services/hello/compose.yaml"]

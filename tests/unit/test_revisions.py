"""Tests for the local revision check."""

import shutil
import subprocess
from pathlib import Path

import pytest

from glr.revisions import RevisionVerifier
from tests.factories import FakeRunner


class _BrokenRunner:
    def run(self, args, *, env=None, quiet=False) -> int:
        raise FileNotFoundError(2, "No such file or directory", "git")


@pytest.fixture
def bare_clone(tmp_path: Path) -> Path:
    """A repos/ root holding teamA/svc as a bare clone with one commit."""
    src = tmp_path / "src"
    src.mkdir()
    git = ["git", "-c", "user.email=test@test.com", "-c", "user.name=Test"]

    subprocess.run(["git", "init"], cwd=src, capture_output=True, check=True)
    (src / "README.md").write_text("# svc\n")
    subprocess.run(["git", "add", "."], cwd=src, capture_output=True, check=True)
    subprocess.run([*git, "commit", "-m", "Initial commit"], cwd=src, capture_output=True, check=True)

    root = tmp_path / "repos"
    (root / "teamA").mkdir(parents=True)
    subprocess.run(
        ["git", "clone", "--bare", str(src), str(root / "teamA" / "svc")],
        capture_output=True, check=True,
    )
    return root


@pytest.mark.unit
class TestRevisionVerifier:
    """Tests for RevisionVerifier with a fake runner."""

    def test_command_line(self, logger) -> None:
        runner = FakeRunner()
        verifier = RevisionVerifier("/repos", runner=runner, logger=logger)
        assert verifier.has_revision("teamA/svc", "abc123") is True
        assert runner.calls == [
            {
                "args": ["git", "--git-dir", "/repos/teamA/svc", "rev-parse", "--verify", "abc123"],
                "env": None,
                "quiet": True,
            }
        ]

    def test_nonzero_exit_is_missing(self, logger) -> None:
        verifier = RevisionVerifier("/repos", runner=FakeRunner(returncode=128), logger=logger)
        assert verifier.has_revision("teamA/svc", "abc123") is False

    def test_git_not_startable_is_missing(self, logger) -> None:
        verifier = RevisionVerifier("/repos", runner=_BrokenRunner(), logger=logger)
        assert verifier.has_revision("teamA/svc", "HEAD") is False


@pytest.mark.unit
@pytest.mark.skipif(shutil.which("git") is None, reason="git is not installed")
class TestRevisionVerifierWithGit:
    """Tests against a real bare clone."""

    def test_head_resolves(self, bare_clone: Path, logger) -> None:
        verifier = RevisionVerifier(str(bare_clone), logger=logger)
        assert verifier.has_revision("teamA/svc", "HEAD") is True

    def test_unknown_revision(self, bare_clone: Path, logger) -> None:
        verifier = RevisionVerifier(str(bare_clone), logger=logger)
        assert verifier.has_revision("teamA/svc", "abc123") is False

    def test_missing_clone(self, bare_clone: Path, logger) -> None:
        verifier = RevisionVerifier(str(bare_clone), logger=logger)
        assert verifier.has_revision("teamA/absent", "HEAD") is False

from __future__ import annotations

import logging
import posixpath

from glr.process import ProcessRunner, SubprocessRunner
from glr.utils.logging_utils import get_logger


class RevisionVerifier:
    """
    Check that a revision resolves inside an existing local clone.

    Clones managed by the fetch/reindex step live at `<root_dir>/<path>` as
    git directories, so the check is a local `git rev-parse --verify` with no
    network access.
    """

    def __init__(
            self,
            root_dir: str,
            runner: ProcessRunner | None = None,
            logger: logging.Logger | None = None,
    ) -> None:
        self.root_dir = root_dir
        self.runner = runner or SubprocessRunner()
        self.logger = logger or get_logger()

    def git_dir(self, path_with_namespace: str) -> str:
        return posixpath.join(self.root_dir, path_with_namespace)

    def has_revision(self, path_with_namespace: str, revision: str) -> bool:
        """
        Return True if `revision` resolves in the clone of `path_with_namespace`.

        A missing clone, an unknown revision and a git binary that cannot be
        started all count as "missing"; none of them is raised.
        """
        args = ["git", "--git-dir", self.git_dir(path_with_namespace), "rev-parse", "--verify", revision]
        try:
            return self.runner.run(args, quiet=True) == 0
        except OSError as e:
            self.logger.debug("git rev-parse could not run for %s: %s", path_with_namespace, e)
            return False

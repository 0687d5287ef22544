# glr/delegate.py
"""
Hand-off to the external `livegrep-fetch-reindex` binary.

The binary clones/fetches every repository listed in the written
specification and builds the search index; this module only derives its
command line, locates it and runs it.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Callable, Sequence
from pathlib import Path

from glr.exceptions import DelegateError
from glr.models import PASSWORD_ENV
from glr.process import ProcessRunner, SubprocessRunner
from glr.utils.logging_utils import get_logger

FETCH_REINDEX_BINARY: str = "livegrep-fetch-reindex"

# (binary name, argv[0]) -> candidate path, or None if the strategy does not apply
ResolveStrategy = Callable[[str, str], str | None]


def adjacent_to_executable(name: str, argv0: str) -> str | None:
    """`<dirname(argv0)>/<name>`: a sibling of the running program."""
    if not argv0:
        return None
    return os.path.join(os.path.dirname(argv0), name)


def substitute_in_invocation(name: str, argv0: str) -> str | None:
    """argv[0] with every occurrence of its own basename replaced by `name`."""
    base = os.path.basename(argv0)
    if not base:
        return None
    return argv0.replace(base, name)


DEFAULT_STRATEGIES: tuple[ResolveStrategy, ...] = (
    adjacent_to_executable,
    substitute_in_invocation,
)


def _is_usable(candidate: str) -> bool:
    p = Path(candidate)
    return p.exists() and not p.is_dir()


def resolve_binary(
        name: str,
        argv0: str,
        strategies: Sequence[ResolveStrategy] = DEFAULT_STRATEGIES,
) -> str:
    """
    Locate a companion binary.

    Each strategy is tried in order; the first candidate that exists and is
    not a directory wins. Without a hit the bare name is returned and the
    launcher looks it up on PATH.
    """
    for strategy in strategies:
        candidate = strategy(name, argv0)
        if candidate and _is_usable(candidate):
            return candidate
    return name


def build_reindex_args(
        *,
        index_path: str,
        codesearch: str,
        num_workers: int,
        spec_path: str,
        no_index: bool = False,
        revparse: bool = True,
        skip_missing: bool = False,
) -> list[str]:
    """Command-line arguments for the fetch/reindex binary; the specification path is always last."""
    args = [
        "--out", index_path,
        "--codesearch", codesearch,
        "--num-workers", str(num_workers),
    ]
    if no_index:
        args.append("--no-index")
    if revparse:
        args.append("--revparse")
    if skip_missing:
        args.append("--skip-missing")
    args.append(spec_path)
    return args


class ReindexDelegator:
    """Run the fetch/reindex binary with inherited output streams."""

    def __init__(self, runner: ProcessRunner | None = None, logger: logging.Logger | None = None) -> None:
        self.runner = runner or SubprocessRunner()
        self.logger = logger or get_logger()

    @staticmethod
    def child_env(token: str | None) -> dict[str, str] | None:
        """
        Environment for the child: inherited as-is without a token, otherwise
        a copy of os.environ with the token under PASSWORD_ENV.
        """
        if not token:
            return None
        env = dict(os.environ)
        env[PASSWORD_ENV] = token
        return env

    def run(self, binary: str, args: Sequence[str], token: str | None = None) -> None:
        """
        Execute `binary args...` and wait for it.

        Raises:
            DelegateError: If the binary cannot be started or exits non-zero.
        """
        self.logger.info("Running: %s %s", binary, list(args))

        try:
            rc = self.runner.run([binary, *args], env=self.child_env(token))
        except OSError as e:
            raise DelegateError(f"{FETCH_REINDEX_BINARY}: {binary}: {e}") from e

        if rc != 0:
            raise DelegateError(f"{FETCH_REINDEX_BINARY}: {binary} exited with status {rc}", returncode=rc)

# glr/process.py
"""
Narrow process-runner capability used by the revision verifier and the
reindex delegator. Tests swap SubprocessRunner for a recording fake.
"""

from __future__ import annotations

import subprocess
from collections.abc import Mapping, Sequence
from typing import Protocol


class ProcessRunner(Protocol):
    def run(
            self,
            args: Sequence[str],
            *,
            env: Mapping[str, str] | None = None,
            quiet: bool = False,
    ) -> int:
        """
        Start `args`, wait for it and return its exit code.

        When `quiet` is False the child's stdout/stderr are this process's own.
        Raises OSError if the program cannot be started.
        """
        ...


class SubprocessRunner:
    """ProcessRunner backed by subprocess.run()."""

    def run(
            self,
            args: Sequence[str],
            *,
            env: Mapping[str, str] | None = None,
            quiet: bool = False,
    ) -> int:
        stream = subprocess.DEVNULL if quiet else None
        result = subprocess.run(
            list(args),
            env=dict(env) if env is not None else None,
            stdout=stream,
            stderr=stream,
            check=False,
        )
        return result.returncode

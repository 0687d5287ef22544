#!/usr/bin/env python3

from __future__ import annotations

import signal
import sys

from glr.cli import CliParser
from glr.exceptions import GitlabReindexError
from glr.pipeline import run
from glr.utils.logging_utils import get_logger

__all__ = ["main"]


def _handle_exit(signum: int, _frame) -> None:  # noqa: ANN001
    """Handle SIGINT/SIGTERM with a clean exit code and no traceback."""
    print("\n[!] Interrupted, exiting.", file=sys.stderr)
    code = 130 if signum == signal.SIGINT else 143  # 128 + SIGINT(2) / SIGTERM(15)
    raise SystemExit(code)


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint."""
    signal.signal(signal.SIGINT, _handle_exit)
    signal.signal(signal.SIGTERM, _handle_exit)

    argv = list(sys.argv[1:] if argv is None else argv)

    try:
        args = CliParser.parse(argv)
        run(args)
    except GitlabReindexError as e:
        get_logger().error("%s", e)
        raise SystemExit(1)
    except KeyboardInterrupt:
        _handle_exit(signal.SIGINT, None)


if __name__ == "__main__":
    main()

from __future__ import annotations

from pathlib import Path

from glr.exceptions import ConfigError

IgnoreSet = frozenset[str]


def load_ignorelist(path: str | Path) -> IgnoreSet:
    """
    Read a newline-delimited ignore list into a set of namespace-qualified paths.

    Lines are taken verbatim: entries are split on LF only, so the CR of a
    CRLF file stays part of the path. No stripping and no comment syntax.
    An empty line becomes the empty string, which never matches a real
    project path.

    Raises:
        ConfigError: If the file cannot be read.
    """
    p = Path(path)
    try:
        data = p.read_bytes().decode("utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError(f"loading {p}: {e}") from e

    return frozenset(data.split("\n"))

from __future__ import annotations

import json
from pathlib import Path

from glr.exceptions import SpecWriteError
from glr.models import IndexSpec


def serialize_index_spec(spec: IndexSpec) -> str:
    """Render the specification as two-space indented JSON."""
    return json.dumps(spec.to_dict(), ensure_ascii=False, indent=2)


def write_index_spec(spec: IndexSpec, path: str | Path) -> Path:
    """
    Persist the specification, creating parent directories as needed.

    The delegate re-reads this file, so any failure here is fatal.

    Raises:
        SpecWriteError: If the directory cannot be created or the file written.
    """
    p = Path(path)
    try:
        p.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise SpecWriteError(f"creating directory {p.parent}: {e}") from e

    try:
        p.write_text(serialize_index_spec(spec), encoding="utf-8")
    except OSError as e:
        raise SpecWriteError(f"writing {p}: {e}") from e

    return p

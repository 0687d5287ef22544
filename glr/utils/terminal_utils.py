#glr/utils/terminal_utils.py
from __future__ import annotations

import shutil
import textwrap
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from tqdm import tqdm

LIST_PROJECTS_ANIM_FRAMES: tuple[str, ...] = ("📦", "📦📦", "📦📦📦", "🗂️", "🔎")


@dataclass(frozen=True, slots=True)
class BarLayout:
    """Width budgets for one progress bar, derived from the terminal width."""
    cols: int
    desc_w: int


def bar_layout(fallback_cols: int = 120) -> BarLayout:
    """Compute a stable layout so the bar does not jitter as descriptions change."""
    cols = shutil.get_terminal_size(fallback=(fallback_cols, 20)).columns
    desc_w = max(18, min(48, int(cols * 0.35)))
    return BarLayout(cols=cols, desc_w=desc_w)


def shorten(text: str, width: int) -> str:
    if width <= 0:
        return ""
    return textwrap.shorten(str(text), width=width, placeholder="…")


def animate(base: str, frames: Sequence[str], i: int) -> str:
    """Prefix `base` with the frame for step `i`."""
    if not frames:
        return base
    return f"{frames[i % len(frames)]} {base}"


def mk_counter(*, lay: BarLayout | None = None, unit: str = "projects", **kwargs: Any) -> tqdm:
    """
    Create an open-ended counter bar (total unknown) for paginated listings.

    Output goes to stderr, like every tqdm bar, so stdout stays free for the
    delegate's own output.
    """
    lay = lay or bar_layout()
    return tqdm(
        total=None,
        leave=False,
        unit=unit,
        ncols=lay.cols,
        dynamic_ncols=False,
        bar_format=f"{{desc:<{lay.desc_w}}} [{{elapsed}}] {{n_fmt}} {{unit}}",
        **kwargs,
    )


def set_desc(pbar: tqdm, text: str, lay: BarLayout) -> None:
    pbar.set_description_str(shorten(text, lay.desc_w), refresh=True)

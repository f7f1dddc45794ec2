"""Intensity -> fill color lookup for rainarea contours.

The 30 colors span intensities 0..100. Color i covers intensities from
(i - 0.5) * 100/30 up to (i + 0.5) * 100/30, so a lookup matches rounding
v/100*30 to the nearest index with halves going up. Values below the first
breakpoint clamp to the first color and values above 100 to the last.
"""
from bisect import bisect_right
from typing import List, Tuple
from .config import OPAQUE_ABOVE

INTENSITY_COLORS = (
    "#40FFFD", "#3BEEEC", "#32D0D2", "#2CB9BD", "#229698",
    "#1C827D", "#1B8742", "#229F44", "#27B240", "#2CC53B",
    "#30D43E", "#38EF46", "#3BFB49", "#59FA61", "#FEFB63",
    "#FDFA53", "#FDEB50", "#FDD74A", "#FCC344", "#FAB03F",
    "#FAA23D", "#FB8938", "#FB7133", "#F94C2D", "#F9282A",
    "#DD1423", "#BE0F1D", "#B21867", "#D028A6", "#F93DF5",
)


def _breakpoints(colors) -> List[Tuple[float, str]]:
    n = len(colors)
    # (2i - 1) * 50 / n keeps the halfway points exact, e.g. 85.0 and 95.0
    return [((2 * i - 1) * 50.0 / n, c) for i, c in enumerate(colors)]


COLOR_TABLE = _breakpoints(INTENSITY_COLORS)
_BOUNDS = [b for b, _ in COLOR_TABLE]


def color_for(value: float) -> str:
    idx = bisect_right(_BOUNDS, value) - 1
    idx = max(0, min(len(COLOR_TABLE) - 1, idx))
    return COLOR_TABLE[idx][1]


def opacity_for(value: float) -> float:
    return 1.0 if value > OPAQUE_ABOVE else 0.4


def hex_to_rgb(color: str) -> Tuple[int, int, int]:
    c = color.lstrip("#")
    return int(c[0:2], 16), int(c[2:4], 16), int(c[4:6], 16)

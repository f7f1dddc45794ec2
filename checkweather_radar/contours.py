# region Imports and Typing
from typing import Dict, Iterable, List, Sequence, Tuple
import numpy as np
from .config import CONTOUR_THRESHOLDS
from .models import ContourPolygon, Point, Ring
# endregion

EdgeKey = Tuple[str, int, int]

# region Case Table
# Corners are listed clockwise from top-left; edge k joins corner k and k+1.
CORNER_BITS = (8, 4, 2, 1)  # TL, TR, BR, BL
TOP, RIGHT, BOTTOM, LEFT = 0, 1, 2, 3


def _build_cases() -> Dict[int, Tuple[Tuple[int, int], ...]]:
    """
    Segments for each of the 16 corner codes as (exit edge, entry edge).

    Every clockwise run of above-threshold corners yields one segment that
    leaves through the edge ending the run and closes on the edge starting
    it. Saddles (codes 5 and 10) therefore keep diagonal corners apart.
    Each crossed edge is the start of exactly one segment and the end of
    exactly one segment across its two neighbouring cells, so rings close.
    """
    cases = {}
    for code in range(16):
        above = [bool(code & bit) for bit in CORNER_BITS]
        segs = []
        for k in range(4):
            if above[k] and not above[(k + 1) % 4]:
                s = k
                while above[(s - 1) % 4]:
                    s -= 1
                segs.append((k, (s - 1) % 4))
        cases[code] = tuple(segs)
    return cases


CASES = _build_cases()
# endregion

# region Edge Helpers
def _edge_key(edge: int, i: int, j: int) -> EdgeKey:
    # "h" edges join nodes (i, j)-(i+1, j), "v" edges join (i, j)-(i, j+1)
    if edge == TOP:
        return ("h", i, j)
    if edge == RIGHT:
        return ("v", i + 1, j)
    if edge == BOTTOM:
        return ("h", i, j + 1)
    return ("v", i, j)


def _edge_point(padded: np.ndarray, key: EdgeKey, threshold: float) -> Point:
    """Crossing point on an edge, in grid coordinates (cell x spans [x, x+1])."""
    kind, i, j = key
    if kind == "h":
        v0, v1 = padded[j, i], padded[j, i + 1]
    else:
        v0, v1 = padded[j, i], padded[j + 1, i]

    if np.isfinite(v0) and np.isfinite(v1):
        frac = float((threshold - v0) / (v1 - v0))
    else:
        # against the padding border: sits exactly on the canvas edge
        frac = 0.5

    if kind == "h":
        return (i - 0.5 + frac, j - 0.5)
    return (i - 0.5, j - 0.5 + frac)
# endregion

# region Marching Squares
def isoline_rings(values: np.ndarray, threshold: float) -> List[Ring]:
    """
    Closed rings bounding the region where values >= threshold.

    The matrix is surrounded by a -inf border so regions touching the edge
    close along it. Interior vertices are linearly interpolated between the
    two neighbouring samples; no smoothing is applied afterwards. Rings come
    out in raster order of their first boundary cell, so repeated runs on
    the same matrix give identical output.
    """
    values = np.asarray(values, dtype=np.float64)
    if values.ndim != 2 or values.size == 0:
        return []
    H, W = values.shape

    padded = np.full((H + 2, W + 2), -np.inf)
    padded[1:-1, 1:-1] = values
    above = (padded >= threshold).astype(np.uint8)

    codes = (
        above[:-1, :-1] * CORNER_BITS[0]
        + above[:-1, 1:] * CORNER_BITS[1]
        + above[1:, 1:] * CORNER_BITS[2]
        + above[1:, :-1] * CORNER_BITS[3]
    )
    rows, cols = np.nonzero((codes > 0) & (codes < 15))

    # region Segment Collection
    next_edge: Dict[EdgeKey, EdgeKey] = {}
    for j, i in zip(rows.tolist(), cols.tolist()):
        for exit_edge, entry_edge in CASES[int(codes[j, i])]:
            next_edge[_edge_key(exit_edge, i, j)] = _edge_key(entry_edge, i, j)
    # endregion

    # region Ring Stitching
    rings: List[Ring] = []
    seen = set()
    for start in next_edge:
        if start in seen:
            continue
        keys = [start]
        seen.add(start)
        k = next_edge[start]
        while k != start:
            seen.add(k)
            keys.append(k)
            k = next_edge[k]
        ring = [_edge_point(padded, key, threshold) for key in keys]
        ring.append(ring[0])
        rings.append(ring)
    # endregion

    return rings


def extract_contours(
    values: np.ndarray,
    thresholds: Iterable[float] = CONTOUR_THRESHOLDS,
) -> List[ContourPolygon]:
    """One ContourPolygon per threshold, ascending, each threshold independent."""
    values = np.asarray(values, dtype=np.float64)
    peak = np.nanmax(values) if values.ndim == 2 and not np.isnan(values).all() else -np.inf
    # nothing reaches t: skip the march entirely
    return [
        ContourPolygon(threshold=t, rings=isoline_rings(values, t) if t <= peak else [])
        for t in sorted(thresholds)
    ]
# endregion

# region Geometry Helpers
def ring_bounds(ring: Sequence[Point]) -> Tuple[float, float, float, float]:
    xs = [p[0] for p in ring]
    ys = [p[1] for p in ring]
    return min(xs), min(ys), max(xs), max(ys)


def ring_area(ring: Sequence[Point]) -> float:
    """Signed shoelace area; outer rings and holes carry opposite signs."""
    a = 0.0
    for (x0, y0), (x1, y1) in zip(ring, ring[1:]):
        a += x0 * y1 - x1 * y0
    return 0.5 * a
# endregion

"""Vector scene for the radar image.

A Scene is an ordered list of typed drawables in canvas pixels (400x226).
The rasterizer walks the same list, and `Scene.to_svg` serializes it once,
passing every text value and attribute through MarkupSafe.
"""
# region Imports
import math
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence, Tuple, Union

from markupsafe import escape

from .config import BACKGROUND, CANVAS_W, CANVAS_H
from .contours import extract_contours
from .geometry import SINGAPORE, BoundingBox, project
from .grid import decode_grid
from .models import ContourPolygon, ObservationPoint, RadarGrid, Ring
from .palette import color_for, opacity_for
from .timestamps import time_label
# endregion

RGBA = Tuple[int, int, int, float]

# Downwind arrow in a 40x40 box, pointing south at 0 degrees
WIND_ICON_SIZE = 40
WIND_ICON = ((17, 5), (23, 5), (23, 23), (30, 23), (20, 35), (10, 23), (17, 23))
WIND_OPACITY = 0.5

TEMP_FONT_SIZE = 13
TEMP_FILL: RGBA = (255, 255, 0, 0.8)
TEMP_OUTLINE: RGBA = (0, 0, 0, 1.0)

STAMP_X, STAMP_Y = 384, 210
STAMP_FONT_SIZE = 16
STAMP_FILL: RGBA = (255, 255, 255, 1.0)
STAMP_STROKE: RGBA = (255, 255, 255, 0.25)

OUTLINE_WIDTH = 3


def _num(v: float) -> str:
    s = f"{v:.2f}".rstrip("0").rstrip(".")
    return "0" if s in ("", "-0") else s


def _attr(value) -> str:
    return str(escape(str(value)))


def _paint(prefix: str, color: Optional[RGBA]) -> str:
    if color is None:
        return f'{prefix}="none"'
    r, g, b, a = color
    return f'{prefix}="rgb({r},{g},{b})" {prefix}-opacity="{_num(a)}"'


# region Drawables
@dataclass
class ContourFill:
    threshold: float
    rings: List[Ring]
    fill: str
    opacity: float

    def path_data(self) -> str:
        parts = []
        for ring in self.rings:
            pts = ring[:-1] if len(ring) > 1 and ring[0] == ring[-1] else ring
            if len(pts) < 3:
                continue
            head, *tail = pts
            parts.append("M" + f"{_num(head[0])},{_num(head[1])}"
                         + "".join(f"L{_num(x)},{_num(y)}" for x, y in tail) + "Z")
        return "".join(parts)

    def to_svg(self) -> str:
        return (f'<path d="{_attr(self.path_data())}" fill="{_attr(self.fill)}" '
                f'fill-opacity="{_num(self.opacity)}"/>')


@dataclass
class WindMarker:
    x: float
    y: float
    rotation: float
    opacity: float = WIND_OPACITY
    size: int = WIND_ICON_SIZE

    def outline(self) -> List[Tuple[float, float]]:
        """Icon polygon placed at (x - size/2, y - size/2), rotated about (x, y)."""
        a = math.radians(self.rotation)
        cos_a, sin_a = math.cos(a), math.sin(a)
        half = self.size / 2.0
        scale = self.size / WIND_ICON_SIZE
        pts = []
        for ix, iy in WIND_ICON:
            dx, dy = ix * scale - half, iy * scale - half
            pts.append((self.x + dx * cos_a - dy * sin_a, self.y + dx * sin_a + dy * cos_a))
        return pts

    def to_svg(self) -> str:
        half = self.size / 2.0
        return (f'<use href="#w" xlink:href="#w" x="{_num(self.x - half)}" y="{_num(self.y - half)}" '
                f'width="{self.size}" height="{self.size}" '
                f'transform="rotate({_num(self.rotation)}, {_num(self.x)}, {_num(self.y)})" '
                f'opacity="{_num(self.opacity)}"/>')


@dataclass
class TextLabel:
    text: str
    x: float
    y: float
    font_size: int
    anchor: str = "middle"          # start | middle | end
    baseline: str = "middle"        # middle | alphabetic
    fill: Optional[RGBA] = None
    stroke: Optional[RGBA] = None
    stroke_width: float = 0

    def to_svg(self) -> str:
        stroke = _paint("stroke", self.stroke)
        if self.stroke is not None:
            stroke += f' stroke-width="{_num(self.stroke_width)}" stroke-linejoin="round"'
        return (f'<text x="{_num(self.x)}" y="{_num(self.y)}" font-size="{self.font_size}" '
                f'font-family="Open Sans, sans-serif" font-weight="bold" '
                f'text-anchor="{_attr(self.anchor)}" dominant-baseline="{_attr(self.baseline)}" '
                f'{_paint("fill", self.fill)} {stroke}>{escape(self.text)}</text>')


Drawable = Union[ContourFill, WindMarker, TextLabel]
# endregion

# region Scene
@dataclass
class Scene:
    width: int = CANVAS_W
    height: int = CANVAS_H
    layers: List[Drawable] = field(default_factory=list)
    background: Tuple[int, int, int] = BACKGROUND

    def add(self, layer: Drawable) -> None:
        self.layers.append(layer)

    def to_svg(self) -> str:
        icon = "L".join(f"{x},{y}" for x, y in WIND_ICON)
        r, g, b = self.background
        out = [
            '<svg xmlns="http://www.w3.org/2000/svg" xmlns:xlink="http://www.w3.org/1999/xlink" '
            f'width="{self.width}" height="{self.height}" viewBox="0 0 {self.width} {self.height}">',
            f'<defs><symbol id="w" viewBox="0 0 {WIND_ICON_SIZE} {WIND_ICON_SIZE}">'
            f'<path d="M{icon}Z" fill="white"/></symbol></defs>',
            f'<rect width="{self.width}" height="{self.height}" fill="rgb({r},{g},{b})"/>',
        ]
        out.extend(layer.to_svg() for layer in self.layers)
        out.append("</svg>")
        return "\n".join(out)
# endregion

# region Composition
def format_temperature(t: float) -> str:
    return f"{t:g}°"


def compose_scene(
    polygons: Iterable[ContourPolygon],
    grid_size: Tuple[int, int],
    observations: Sequence[ObservationPoint] = (),
    label: str = "",
    bbox: BoundingBox = SINGAPORE,
) -> Scene:
    """
    Layer order: contour fills (ascending threshold), wind markers,
    temperature labels (outline pass then fill pass), timestamp label.
    """
    scene = Scene(width=bbox.width, height=bbox.height)
    grid_w, grid_h = grid_size
    sx = bbox.width / grid_w if grid_w else 1.0
    sy = bbox.height / grid_h if grid_h else 1.0

    for poly in sorted(polygons, key=lambda p: p.threshold):
        if poly.empty or not poly.threshold:
            continue
        rings = [[(x * sx, y * sy) for x, y in ring] for ring in poly.rings]
        scene.add(ContourFill(poly.threshold, rings, color_for(poly.threshold),
                              opacity_for(poly.threshold)))

    for obs in observations:
        if obs.wind_direction_degrees is None:
            continue
        x, y = project(obs.longitude, obs.latitude, bbox)
        scene.add(WindMarker(x, y, obs.wind_direction_degrees))

    for obs in observations:
        if obs.temperature_celsius is None:
            continue
        x, y = project(obs.longitude, obs.latitude, bbox)
        text = format_temperature(obs.temperature_celsius)
        scene.add(TextLabel(text, x, y, TEMP_FONT_SIZE, stroke=TEMP_OUTLINE,
                            stroke_width=OUTLINE_WIDTH))
        scene.add(TextLabel(text, x, y, TEMP_FONT_SIZE, fill=TEMP_FILL))

    if label:
        scene.add(TextLabel(label, STAMP_X, STAMP_Y, STAMP_FONT_SIZE, anchor="end",
                            baseline="alphabetic", fill=STAMP_FILL, stroke=STAMP_STROKE,
                            stroke_width=OUTLINE_WIDTH))
    return scene


def build_scene(grid: RadarGrid, observations: Sequence[ObservationPoint]) -> Scene:
    """Full pipeline: decode, contour, project and layer one rainarea snapshot."""
    values = decode_grid(grid)
    polygons = extract_contours(values)
    return compose_scene(polygons, (grid.width, grid.height), observations,
                         time_label(grid.dataset_id))
# endregion

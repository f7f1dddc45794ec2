# region Imports
import io
import logging
import queue
import threading
from contextlib import contextmanager
from functools import lru_cache
from typing import Optional, Tuple

from PIL import Image, ImageChops, ImageDraw, ImageFont

from .config import BACKGROUND, CANVAS_H, CANVAS_W, FONT_PATH, JPEG_QUALITY, POOL_SIZE, SCALE
from .palette import hex_to_rgb
from .scene import ContourFill, Scene, TextLabel, WindMarker
# endregion

logger = logging.getLogger(__name__)

_H_ANCHOR = {"start": "l", "middle": "m", "end": "r"}
_V_ANCHOR = {"middle": "m", "alphabetic": "s"}


class RasterError(RuntimeError):
    """The scene could not be rasterized or encoded."""


# region Surface Pool
class RenderSurfacePool:
    """
    Reusable RGBA surfaces, one checked out per render.

    A surface is health-checked on checkout and on checkin; broken or
    mis-sized surfaces are dropped and replaced. At most `max_idle`
    surfaces are kept between requests.
    """

    def __init__(self, size: Tuple[int, int] = (CANVAS_W * SCALE, CANVAS_H * SCALE),
                 max_idle: int = POOL_SIZE, background: Tuple[int, int, int] = BACKGROUND):
        self.size = size
        self.background = background
        self._idle: "queue.LifoQueue[Image.Image]" = queue.LifoQueue(maxsize=max(1, max_idle))
        self._lock = threading.Lock()
        self.created = 0

    def healthy(self, surface: Image.Image) -> bool:
        try:
            surface.getpixel((0, 0))
        except (ValueError, AttributeError):
            return False
        return surface.size == self.size and surface.mode == "RGBA"

    def _new_surface(self) -> Image.Image:
        with self._lock:
            self.created += 1
        return Image.new("RGBA", self.size, self.background + (255,))

    def checkout(self) -> Image.Image:
        try:
            surface = self._idle.get_nowait()
        except queue.Empty:
            return self._new_surface()
        if not self.healthy(surface):
            logger.warning("Discarding unhealthy render surface")
            return self._new_surface()
        surface.paste(self.background + (255,), (0, 0) + self.size)
        return surface

    def checkin(self, surface: Image.Image) -> None:
        if not self.healthy(surface):
            return
        try:
            self._idle.put_nowait(surface)
        except queue.Full:
            surface.close()

    @contextmanager
    def surface(self):
        s = self.checkout()
        try:
            yield s
        finally:
            self.checkin(s)
# endregion

# region Painters
@lru_cache(maxsize=16)
def _font(size: int):
    try:
        return ImageFont.truetype(FONT_PATH or "DejaVuSans-Bold.ttf", size)
    except OSError:
        return ImageFont.load_default(size=size)


def _rgba(color) -> Tuple[int, int, int, int]:
    r, g, b, a = color
    return int(r), int(g), int(b), int(round(a * 255))


def _composite(base: Image.Image, paint) -> None:
    overlay = Image.new("RGBA", base.size, (0, 0, 0, 0))
    paint(ImageDraw.Draw(overlay))
    base.alpha_composite(overlay)


def _draw_contour(base: Image.Image, layer: ContourFill, scale: float) -> None:
    # even-odd fill so holes stay open
    mask = Image.new("1", base.size, 0)
    for ring in layer.rings:
        if len(ring) < 3:
            continue
        ring_mask = Image.new("1", base.size, 0)
        ImageDraw.Draw(ring_mask).polygon([(x * scale, y * scale) for x, y in ring], fill=1)
        mask = ImageChops.logical_xor(mask, ring_mask)
    overlay = Image.new("RGBA", base.size, (0, 0, 0, 0))
    color = hex_to_rgb(layer.fill) + (int(round(layer.opacity * 255)),)
    overlay.paste(color, (0, 0) + base.size, mask)
    base.alpha_composite(overlay)


def _draw_wind(base: Image.Image, layer: WindMarker, scale: float) -> None:
    pts = [(x * scale, y * scale) for x, y in layer.outline()]
    fill = (255, 255, 255, int(round(layer.opacity * 255)))
    _composite(base, lambda d: d.polygon(pts, fill=fill))


def _draw_text(base: Image.Image, layer: TextLabel, scale: float) -> None:
    font = _font(int(round(layer.font_size * scale)))
    anchor = _H_ANCHOR.get(layer.anchor, "m") + _V_ANCHOR.get(layer.baseline, "m")
    xy = (layer.x * scale, layer.y * scale)
    # SVG strokes straddle the glyph edge, PIL strokes sit outside it
    stroke_px = int(round(layer.stroke_width * scale / 2)) if layer.stroke else 0
    stroke = _rgba(layer.stroke) if layer.stroke else None
    fill = _rgba(layer.fill) if layer.fill else stroke

    def paint(d):
        d.text(xy, layer.text, font=font, anchor=anchor, fill=fill,
               stroke_width=stroke_px, stroke_fill=stroke)

    _composite(base, paint)
# endregion

# region Rasterize
def rasterize(scene: Scene, pool: Optional[RenderSurfacePool] = None,
              scale: int = SCALE, quality: int = JPEG_QUALITY) -> bytes:
    """Paint the scene layers in order and encode a progressive JPEG."""
    pool = pool or RenderSurfacePool((scene.width * scale, scene.height * scale),
                                     background=scene.background)
    if pool.size != (scene.width * scale, scene.height * scale):
        raise RasterError(f"pool surfaces are {pool.size}, scene needs "
                          f"{(scene.width * scale, scene.height * scale)}")

    with pool.surface() as base:
        for layer in scene.layers:
            if isinstance(layer, ContourFill):
                _draw_contour(base, layer, scale)
            elif isinstance(layer, WindMarker):
                _draw_wind(base, layer, scale)
            elif isinstance(layer, TextLabel):
                _draw_text(base, layer, scale)

        buf = io.BytesIO()
        try:
            base.convert("RGB").save(buf, "JPEG", quality=quality, progressive=True)
        except (OSError, ValueError) as e:
            raise RasterError(f"JPEG encoding failed: {e}") from e
    return buf.getvalue()
# endregion

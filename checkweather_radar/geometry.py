# region Imports
from dataclasses import dataclass
from typing import Tuple
from .config import LOWER_LAT, UPPER_LAT, LOWER_LONG, UPPER_LONG, CANVAS_W, CANVAS_H
# endregion

# region Bounding Box
@dataclass(frozen=True)
class BoundingBox:
    lower_lat: float = LOWER_LAT
    upper_lat: float = UPPER_LAT
    lower_long: float = LOWER_LONG
    upper_long: float = UPPER_LONG
    width: int = CANVAS_W
    height: int = CANVAS_H

    @property
    def long_range(self) -> float:
        return self.upper_long - self.lower_long

    @property
    def lat_range(self) -> float:
        return self.upper_lat - self.lower_lat


SINGAPORE = BoundingBox()
# endregion

# region Projection
def project(long: float, lat: float, bbox: BoundingBox = SINGAPORE) -> Tuple[float, float]:
    """
    Flat affine lon/lat -> canvas pixel mapping; north is up, y grows down.
    The box is small enough that no geodesic correction is applied. Points
    outside the box project outside the canvas and are left to the caller.
    """
    x = (long - bbox.lower_long) / bbox.long_range * bbox.width
    y = (bbox.upper_lat - lat) / bbox.lat_range * bbox.height
    return x, y


def in_canvas(x: float, y: float, bbox: BoundingBox = SINGAPORE) -> bool:
    return 0.0 <= x <= bbox.width and 0.0 <= y <= bbox.height
# endregion

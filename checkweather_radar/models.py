# models.py
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

Point = Tuple[float, float]
Ring = List[Point]


@dataclass
class ObservationPoint:
    longitude: float
    latitude: float
    temperature_celsius: Optional[float] = None
    wind_direction_degrees: Optional[float] = None


@dataclass
class RadarGrid:
    dataset_id: str
    width: int
    height: int
    encoded_rows: Sequence[str] = field(default_factory=list)


@dataclass
class ContourPolygon:
    threshold: float
    rings: List[Ring] = field(default_factory=list)   # closed, grid coordinates

    @property
    def empty(self) -> bool:
        return not self.rings


@dataclass
class CachePolicy:
    max_age_seconds: int = 0
    immutable: bool = False
    must_revalidate: bool = False
    stale_while_revalidate: int = 0

    def header(self) -> str:
        parts = ["public", f"max-age={int(self.max_age_seconds)}"]
        if self.immutable:
            parts.append("immutable")
        if self.must_revalidate:
            parts.append("must-revalidate")
        if self.stale_while_revalidate > 0:
            parts.append(f"stale-while-revalidate={int(self.stale_while_revalidate)}")
        return ", ".join(parts)

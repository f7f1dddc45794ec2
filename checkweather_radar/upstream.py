# region Imports
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, List, Optional, Tuple

import requests

from .config import OBSERVATIONS_URL, RAINAREA_URL, UPSTREAM_TIMEOUT
from .grid import split_radar_text
from .models import ObservationPoint, RadarGrid
# endregion

logger = logging.getLogger(__name__)


class UpstreamError(RuntimeError):
    """An upstream feed could not be fetched or decoded."""


# region Parsing
def _opt_float(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def parse_observations(payload: Any) -> List[ObservationPoint]:
    """Observation feed -> points; entries without a usable lng/lat are skipped."""
    if not isinstance(payload, list):
        raise UpstreamError("observations payload is not a list")
    points = []
    for i, f in enumerate(payload):
        if not isinstance(f, dict):
            logger.warning("Skipping observation %d: not an object", i)
            continue
        lng, lat = _opt_float(f.get("lng")), _opt_float(f.get("lat"))
        if lng is None or lat is None:
            logger.warning("Skipping observation %d: missing lng/lat", i)
            continue
        points.append(ObservationPoint(
            longitude=lng,
            latitude=lat,
            temperature_celsius=_opt_float(f.get("temp_celcius")),
            wind_direction_degrees=_opt_float(f.get("wind_direction")),
        ))
    return points


def parse_rainarea(payload: Any) -> RadarGrid:
    if not isinstance(payload, dict):
        raise UpstreamError("rainarea payload is not an object")
    try:
        width, height = int(payload["width"]), int(payload["height"])
    except (KeyError, TypeError, ValueError) as e:
        raise UpstreamError(f"rainarea payload has no usable size: {e}") from e
    rows = split_radar_text(payload.get("radar") or "")
    if len(rows) != height:
        logger.warning("Rainarea has %d rows, expected %d", len(rows), height)
    return RadarGrid(
        dataset_id=str(payload.get("id") or ""),
        width=width,
        height=height,
        encoded_rows=rows,
    )
# endregion

# region Fetching
def fetch_json(url: str, session: Optional[requests.Session] = None,
               timeout: float = UPSTREAM_TIMEOUT) -> Any:
    getter = session.get if session is not None else requests.get
    try:
        r = getter(url, timeout=timeout)
        r.raise_for_status()
        return r.json()
    except requests.RequestException as e:
        raise UpstreamError(f"GET {url} failed: {e}") from e
    except ValueError as e:
        raise UpstreamError(f"GET {url} returned invalid JSON: {e}") from e


def fetch_all(session: Optional[requests.Session] = None) -> Tuple[List[ObservationPoint], RadarGrid]:
    """Fetch observations and rainarea concurrently and wait for both."""
    with ThreadPoolExecutor(max_workers=2) as pool:
        obs_future = pool.submit(fetch_json, OBSERVATIONS_URL, session)
        rain_future = pool.submit(fetch_json, RAINAREA_URL, session)
        obs_payload = obs_future.result()
        rain_payload = rain_future.result()
    return parse_observations(obs_payload), parse_rainarea(rain_payload)
# endregion

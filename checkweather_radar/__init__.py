"""Composite rainarea radar image for Singapore."""
from .cache import cache_policy, freshness_policy
from .contours import extract_contours, isoline_rings
from .geometry import project
from .grid import decode_radar, encode_radar
from .scene import Scene, build_scene, compose_scene
from .timestamps import TimeParseError, minutes_between, time_label

__version__ = "0.1.0"

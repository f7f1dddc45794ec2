# config.py
import os

OBSERVATIONS_URL = os.environ.get("RADAR_OBSERVATIONS_URL", "https://api.checkweather.sg/v2/observations")
RAINAREA_URL = os.environ.get("RADAR_RAINAREA_URL", "https://api.checkweather.sg/v2/rainarea")
UPSTREAM_TIMEOUT = float(os.environ.get("RADAR_UPSTREAM_TIMEOUT", "10"))

# Singapore bounding box covered by the rainarea grid
LOWER_LAT, UPPER_LAT = 1.156, 1.475
LOWER_LONG, UPPER_LONG = 103.565, 104.13

# Logical canvas; the rasterizer multiplies by SCALE
CANVAS_W, CANVAS_H = 400, 226
SCALE = int(os.environ.get("RADAR_SCALE", "2"))
JPEG_QUALITY = int(os.environ.get("RADAR_JPEG_QUALITY", "80"))
BACKGROUND = (10, 22, 34)
FONT_PATH = os.environ.get("RADAR_FONT_PATH") or None
POOL_SIZE = int(os.environ.get("RADAR_POOL_SIZE", "2"))

CONTOUR_THRESHOLDS = (4, 10, 20, 30, 40, 50, 60, 70, 80, 85, 90, 95, 97.5)
# Above this intensity fills are drawn fully opaque
OPAQUE_ABOVE = 90

TIMEZONE = os.environ.get("RADAR_TIMEZONE", "Asia/Singapore")
# Upstream refreshes every 5-6 minutes
FRESHNESS_MINUTES = int(os.environ.get("RADAR_FRESHNESS_MINUTES", "6"))
IMMUTABLE_MAX_AGE = 31_536_000
STALE_ON_SKEW = os.environ.get("RADAR_STALE_ON_SKEW", "1") not in ("0", "false", "no")
STALE_WHILE_REVALIDATE = int(os.environ.get("RADAR_STALE_WHILE_REVALIDATE", "0"))
# "zero" | "revalidate"
ON_PARSE_ERROR = os.environ.get("RADAR_ON_PARSE_ERROR", "zero").lower()

LOG_LEVEL = os.environ.get("RADAR_LOG_LEVEL", "INFO").upper()
PORT = int(os.environ.get("RADAR_PORT", "8081"))

# app.py: Flask endpoints serving the composite rainarea radar image
# deps: pip install flask numpy pillow requests markupsafe

from __future__ import annotations
import logging
import time
from typing import Tuple

from flask import Flask, request, jsonify, make_response

from .config import CANVAS_H, CANVAS_W, LOG_LEVEL, OBSERVATIONS_URL, PORT, RAINAREA_URL
from .cache import cache_policy
from .models import RadarGrid
from .raster import RasterError, RenderSurfacePool, rasterize
from .scene import Scene, build_scene
from .upstream import UpstreamError, fetch_all

logging.basicConfig(level=getattr(logging, LOG_LEVEL, logging.INFO),
                    format='%(asctime)s | %(levelname)s | %(message)s')
logger = logging.getLogger(__name__)

app = Flask(__name__)
surfaces = RenderSurfacePool()

# ======= CORS / favicon =======
@app.after_request
def _cors(resp):
    resp.headers["Access-Control-Allow-Origin"]  = "*"
    resp.headers["Access-Control-Allow-Headers"] = "*"
    resp.headers["Access-Control-Allow-Methods"] = "GET,OPTIONS"
    return resp

@app.before_request
def _favicon():
    if "favicon" in request.path.lower():
        return "", 204

# ======= pipeline =======
def load_scene() -> Tuple[RadarGrid, Scene]:
    observations, grid = fetch_all()
    return grid, build_scene(grid, observations)

def _cache_header(grid: RadarGrid) -> str:
    return cache_policy(grid.dataset_id, request.args.get("dt")).header()

# ======= endpoints =======
@app.route("/", methods=["GET"])
def root():
    return {"ok": True, "image": "/radar", "svg": "/radar.svg",
            "canvas": [CANVAS_W, CANVAS_H],
            "sources": {"observations": OBSERVATIONS_URL, "rainarea": RAINAREA_URL}}

@app.route("/radar", methods=["GET"])
@app.route("/radar.jpg", methods=["GET"])
def radar_image():
    t0 = time.perf_counter()
    try:
        grid, scene = load_scene()
    except UpstreamError as e:
        logger.exception("Upstream fetch failed")
        return jsonify({"error": f"Upstream unavailable: {e}"}), 502

    try:
        image = rasterize(scene, surfaces)
    except RasterError as e:
        logger.exception("Rasterization failed")
        return jsonify({"error": f"Render failed: {e}"}), 500

    resp = make_response(image)
    resp.headers["Content-Type"] = "image/jpeg"
    resp.headers["Cache-Control"] = _cache_header(grid)
    logger.info("Radar %s rendered in %.0f ms", grid.dataset_id,
                (time.perf_counter() - t0) * 1000.0)
    return resp

@app.route("/radar.svg", methods=["GET"])
def radar_svg():
    try:
        grid, scene = load_scene()
    except UpstreamError as e:
        logger.exception("Upstream fetch failed")
        return jsonify({"error": f"Upstream unavailable: {e}"}), 502

    resp = make_response(scene.to_svg())
    resp.headers["Content-Type"] = "image/svg+xml; charset=utf-8"
    resp.headers["Cache-Control"] = _cache_header(grid)
    return resp


if __name__ == "__main__":
    app.run(host="0.0.0.0", port=PORT, threaded=True)

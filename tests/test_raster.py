"""Tests for Pillow rasterization and the render-surface pool."""
import io
import unittest

from PIL import Image

from checkweather_radar.models import ContourPolygon, ObservationPoint
from checkweather_radar.raster import RasterError, RenderSurfacePool, rasterize
from checkweather_radar.scene import Scene, compose_scene


class TestRasterize(unittest.TestCase):

    def setUp(self):
        ring = [(0, 0), (2, 0), (2, 2), (0, 2), (0, 0)]
        hole = [(0.5, 0.5), (0.5, 1.5), (1.5, 1.5), (1.5, 0.5), (0.5, 0.5)]
        self.scene = compose_scene(
            [ContourPolygon(95, [ring, hole])], (4, 4),
            [ObservationPoint(103.8, 1.3, 29.0, 135)], "3:05 PM",
        )

    def test_jpeg_at_device_scale(self):
        data = rasterize(self.scene, scale=2)
        self.assertEqual(data[:2], b"\xff\xd8")
        img = Image.open(io.BytesIO(data))
        self.assertEqual(img.format, "JPEG")
        self.assertEqual(img.size, (800, 452))

    def test_contour_fill_keeps_hole(self):
        data = rasterize(self.scene, scale=1)
        img = Image.open(io.BytesIO(data)).convert("RGB")
        fill = img.getpixel((20, 20))     # inside ring, outside hole
        hole = img.getpixel((100, 56))    # centre of the hole
        corner = img.getpixel((390, 5))   # untouched background
        self.assertGreater(fill[0], 150)  # magenta-ish #F93DF5
        self.assertLess(abs(hole[0] - corner[0]), 25)

    def test_pool_size_mismatch(self):
        with self.assertRaises(RasterError):
            rasterize(Scene(), RenderSurfacePool((10, 10)), scale=2)


class TestRenderSurfacePool(unittest.TestCase):

    def test_surfaces_are_reused(self):
        pool = RenderSurfacePool((800, 452))
        rasterize(Scene(), pool, scale=2)
        rasterize(Scene(), pool, scale=2)
        self.assertEqual(pool.created, 1)

    def test_checkout_clears_surface(self):
        pool = RenderSurfacePool((4, 4), background=(1, 2, 3))
        s = pool.checkout()
        s.putpixel((0, 0), (255, 0, 0, 255))
        pool.checkin(s)
        again = pool.checkout()
        self.assertIs(again, s)
        self.assertEqual(again.getpixel((0, 0)), (1, 2, 3, 255))

    def test_unhealthy_surfaces_are_replaced(self):
        pool = RenderSurfacePool((4, 4))
        pool._idle.put_nowait(Image.new("RGBA", (2, 2)))
        s = pool.checkout()
        self.assertEqual(s.size, (4, 4))
        self.assertEqual(pool.created, 1)

    def test_closed_surface_not_returned(self):
        pool = RenderSurfacePool((4, 4))
        s = pool.checkout()
        s.close()
        pool.checkin(s)
        self.assertTrue(pool._idle.empty())

    def test_idle_bound(self):
        pool = RenderSurfacePool((4, 4), max_idle=1)
        a, b = pool.checkout(), pool.checkout()
        pool.checkin(a)
        pool.checkin(b)
        self.assertEqual(pool._idle.qsize(), 1)


if __name__ == "__main__":
    unittest.main()

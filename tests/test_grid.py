"""Tests for rainarea grid decoding."""
import unittest
import numpy as np

from checkweather_radar.grid import decode_radar, encode_radar, split_radar_text
from checkweather_radar.models import RadarGrid
from checkweather_radar.grid import decode_grid


class TestDecodeRadar(unittest.TestCase):

    def test_printable_ascii_offsets(self):
        values = decode_radar(['!"#'], 3, 1)
        np.testing.assert_array_equal(values.ravel(), [0, 1, 2])

    def test_leading_and_inner_whitespace_are_clear(self):
        values = decode_radar(["  # $"], 5, 1)
        np.testing.assert_array_equal(values.ravel(), [0, 0, 2, 0, 3])

    def test_short_rows_and_missing_rows_pad_with_zero(self):
        values = decode_radar(["#", "##"], 3, 3)
        self.assertEqual(values.shape, (3, 3))
        np.testing.assert_array_equal(values, [[2, 0, 0], [2, 2, 0], [0, 0, 0]])

    def test_overflow_is_ignored(self):
        values = decode_radar(["####", "####", "####"], 2, 2)
        np.testing.assert_array_equal(values, np.full((2, 2), 2.0))

    def test_row_major_flat_index(self):
        values = decode_radar(["!#", "$%"], 2, 2)
        flat = values.ravel()
        self.assertEqual(flat[1 * 2 + 0], 3)
        self.assertEqual(flat[1 * 2 + 1], 4)

    def test_values_below_offset_are_not_clamped(self):
        values = decode_radar(["\x14"], 1, 1)
        self.assertEqual(values[0, 0], 20 - 33)

    def test_decode_grid_uses_grid_dimensions(self):
        grid = RadarGrid("dBR.20240101.1430", 2, 1, ["%%%"])
        np.testing.assert_array_equal(decode_grid(grid), [[4, 4]])


class TestRadarText(unittest.TestCase):

    def test_trailing_whitespace_trimmed(self):
        self.assertEqual(split_radar_text("  #$\n %\n   \n\n"), ["  #$", " %"])

    def test_empty_text(self):
        self.assertEqual(split_radar_text(""), [])
        self.assertEqual(split_radar_text(None), [])


class TestRoundTrip(unittest.TestCase):

    def test_decode_reproduces_encoded_values(self):
        rng = np.random.default_rng(7)
        values = rng.integers(0, 94, size=(12, 17)).astype(np.float64)
        values[:, :3] = 0  # leading clear cells
        values[:, -2:] = 0  # trailing clear cells get trimmed
        rows = encode_radar(values)
        decoded = decode_radar(rows, 17, 12)
        np.testing.assert_array_equal(decoded, values)


if __name__ == "__main__":
    unittest.main()

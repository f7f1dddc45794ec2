"""Tests for the Cache-Control freshness window."""
import unittest
from datetime import datetime, timezone
from zoneinfo import ZoneInfo

from checkweather_radar.cache import cache_policy, freshness_policy
from checkweather_radar.models import CachePolicy

SGT = ZoneInfo("Asia/Singapore")


class TestFreshnessPolicy(unittest.TestCase):

    def test_remaining_window(self):
        p = freshness_policy("10:00", "10:03", 6)
        self.assertEqual(p.max_age_seconds, 180)
        self.assertFalse(p.must_revalidate)
        self.assertEqual(p.header(), "public, max-age=180")

    def test_window_used_up(self):
        p = freshness_policy("10:00", "10:07", 6)
        self.assertTrue(p.must_revalidate)
        self.assertEqual(p.max_age_seconds, 0)
        self.assertEqual(p.header(), "public, max-age=0, must-revalidate")

    def test_exactly_at_window_end(self):
        self.assertTrue(freshness_policy("10:00", "10:06", 6).must_revalidate)
        self.assertEqual(freshness_policy("10:00", "10:05", 6).max_age_seconds, 60)

    def test_five_minute_window(self):
        self.assertEqual(freshness_policy("10:00", "10:01", 5).max_age_seconds, 240)

    def test_twelve_hour_dataset_label(self):
        self.assertEqual(freshness_policy("2:30 PM", "14:32", 6).max_age_seconds, 240)

    def test_dataset_ahead_of_clock(self):
        self.assertTrue(freshness_policy("10:10", "10:03", 6).must_revalidate)
        p = freshness_policy("10:10", "10:03", 6, stale_on_skew=False)
        self.assertEqual(p.max_age_seconds, 13 * 60)

    def test_stale_while_revalidate(self):
        p = freshness_policy("10:00", "10:09", 6, stale_while_revalidate=30)
        self.assertEqual(p.header(), "public, max-age=0, must-revalidate, stale-while-revalidate=30")

    def test_across_midnight(self):
        self.assertEqual(freshness_policy("11:58 PM", "00:01", 6).max_age_seconds, 180)

    def test_parse_error_falls_back_to_full_window(self):
        p = freshness_policy("", "10:03", 6, on_parse_error="zero")
        self.assertEqual(p.max_age_seconds, 360)

    def test_parse_error_can_force_revalidation(self):
        p = freshness_policy("", "10:03", 6, on_parse_error="revalidate")
        self.assertTrue(p.must_revalidate)


class TestCachePolicy(unittest.TestCase):

    def test_pinned_dataset_is_immutable(self):
        p = cache_policy("dBR.20240101.1000", requested_id="dBR.20240101.1000")
        self.assertTrue(p.immutable)
        self.assertEqual(p.max_age_seconds, 31536000)
        self.assertEqual(p.header(), "public, max-age=31536000, immutable")

    def test_missing_dataset_id_is_never_pinned(self):
        now = datetime(2024, 1, 1, 10, 3, tzinfo=SGT)
        p = cache_policy("", requested_id="", now=now, window=6)
        self.assertFalse(p.immutable)
        self.assertNotEqual(p.max_age_seconds, 31536000)

    def test_other_dataset_uses_clock(self):
        now = datetime(2024, 1, 1, 10, 3, 40, tzinfo=SGT)
        p = cache_policy("dBR.20240101.1000", requested_id="dBR.20240101.0954", now=now, window=6)
        self.assertEqual(p, CachePolicy(max_age_seconds=180))

    def test_now_converted_to_local_zone(self):
        now = datetime(2024, 1, 1, 2, 3, tzinfo=timezone.utc)  # 10:03 in Singapore
        self.assertEqual(cache_policy("x1000", now=now, window=6).max_age_seconds, 180)


if __name__ == "__main__":
    unittest.main()

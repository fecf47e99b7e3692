import unittest
from datetime import datetime, timezone

import numpy as np

from pyscenario.structs import HEADING_NOT_AVAILABLE
from pyscenario.tracker.timeline import (
    NoPriorSample, PositionSample, SampleKind, Timeline
)
from pyscenario.utils import EARTH_RADIUS, to_millis

HOUR = 3_600_000

def great_circle_nm(lat1, lon1, lat2, lon2) -> float:
    """
    Haversine distance between two points in nautical miles.
    """
    lat1, lon1, lat2, lon2 = map(np.radians, [lat1, lon1, lat2, lon2])
    a = (
        np.sin((lat2 - lat1)/2)**2 + np.cos(lat1) *
        np.cos(lat2) * np.sin((lon2 - lon1)/2)**2
    )
    return 2 * EARTH_RADIUS * np.arcsin(np.sqrt(a)) / 1852

def sample(ts, lat, lon, cog=90., sog=10., heading=88):
    return PositionSample(
        timestamp=ts, lat=lat, lon=lon,
        cog=cog, sog=sog, heading=heading
    )

class TestTimeline(unittest.TestCase):

    def setUp(self) -> None:
        self.timeline = Timeline()

    def test_empty_timeline(self):
        """
        An empty timeline has no first or last
        sample and cannot be queried.
        """
        self.assertIsNone(self.timeline.first())
        self.assertIsNone(self.timeline.last())
        self.assertEqual(len(self.timeline), 0)
        with self.assertRaises(NoPriorSample):
            self.timeline.query(0)

    def test_iteration_is_time_ascending(self):
        """
        Samples inserted out of order are
        iterated in ascending time.
        """
        for ts in (3000, 1000, 2000, 500):
            self.timeline.insert(sample(ts, 55., 10.))
        self.assertEqual(
            [s.timestamp for s in self.timeline],
            [500, 1000, 2000, 3000]
        )
        self.assertEqual(self.timeline.first().timestamp, 500)
        self.assertEqual(self.timeline.last().timestamp, 3000)

    def test_same_timestamp_overwrites(self):
        self.timeline.insert(sample(1000, 55., 10.))
        self.timeline.insert(sample(1000, 56., 11.))
        self.assertEqual(len(self.timeline), 1)
        self.assertEqual(self.timeline.first().lat, 56.)

    def test_exact_query_returns_stored_sample(self):
        """
        A query at a known timestamp returns the
        stored sample itself, no estimation involved.
        """
        stored = sample(1000, 55., 10.)
        self.timeline.insert(stored)
        self.timeline.insert(sample(2000, 56., 11.))
        self.assertIs(self.timeline.query(1000), stored)
        self.assertEqual(self.timeline.query(1000).kind, SampleKind.OBSERVED)

    def test_query_before_first_sample(self):
        self.timeline.insert(sample(1000, 55., 10.))
        with self.assertRaises(NoPriorSample):
            self.timeline.query(999)

    def test_interpolation_between_samples(self):
        """
        Positions between two samples are linearly
        interpolated.
        """
        self.timeline.insert(sample(0, 55., 10.))
        self.timeline.insert(sample(10_000, 56., 11.))
        est = self.timeline.query(2_500)
        self.assertEqual(est.timestamp, 2_500)
        self.assertAlmostEqual(est.lat, 55.25)
        self.assertAlmostEqual(est.lon, 10.25)
        self.assertEqual(est.kind, SampleKind.INTERPOLATED)
        self.assertTrue(est.is_estimated)

    def test_interpolation_keeps_earlier_kinematics(self):
        """
        Intentional approximation: course, speed and heading
        of an interpolated sample are those of the earlier
        sample, not interpolated values.
        """
        self.timeline.insert(sample(0, 55., 10., cog=90., sog=10., heading=88))
        self.timeline.insert(sample(10_000, 56., 11., cog=180., sog=20., heading=179))
        est = self.timeline.query(5_000)
        self.assertEqual(est.cog, 90.)
        self.assertEqual(est.sog, 10.)
        self.assertEqual(est.heading, 88)

    def test_interpolated_position_lies_between(self):
        self.timeline.insert(sample(0, 54.5, 9.5))
        self.timeline.insert(sample(60_000, 56., 11.))
        for t in (1, 15_000, 30_000, 59_999):
            est = self.timeline.query(t)
            self.assertTrue(54.5 < est.lat < 56.)
            self.assertTrue(9.5 < est.lon < 11.)

    def test_dead_reckoning_east(self):
        """
        One hour at 10 knots due east covers 10 nautical
        miles along the equator.
        """
        self.timeline.insert(sample(0, 0., 0., cog=90., sog=10.))
        est = self.timeline.query(HOUR)
        self.assertEqual(est.kind, SampleKind.EXTRAPOLATED)
        self.assertAlmostEqual(est.lat, 0., places=9)
        self.assertGreater(est.lon, 0.)
        self.assertAlmostEqual(great_circle_nm(0., 0., est.lat, est.lon), 10., places=6)

    def test_dead_reckoning_north(self):
        self.timeline.insert(sample(0, 54., 10., cog=0., sog=12.))
        est = self.timeline.query(2 * HOUR)
        self.assertGreater(est.lat, 54.)
        self.assertAlmostEqual(est.lon, 10., places=9)
        self.assertAlmostEqual(great_circle_nm(54., 10., est.lat, est.lon), 24., places=6)

    def test_dead_reckoning_holds_kinematics(self):
        self.timeline.insert(sample(0, 55., 10., cog=45., sog=8., heading=HEADING_NOT_AVAILABLE))
        est = self.timeline.query(HOUR)
        self.assertEqual(est.cog, 45.)
        self.assertEqual(est.sog, 8.)
        self.assertEqual(est.heading, HEADING_NOT_AVAILABLE)

    def test_dead_reckoning_without_speed(self):
        self.timeline.insert(sample(0, 55., 10., sog=0.))
        est = self.timeline.query(HOUR)
        self.assertEqual((est.lat, est.lon), (55., 10.))

    def test_dead_reckoning_without_course_or_speed(self):
        """
        Not-available course or speed values (360.0, 102.3)
        hold the last position instead of moving it.
        """
        for cog, sog in ((360., 10.), (90., 102.3)):
            timeline = Timeline()
            timeline.insert(sample(0, 55., 10., cog=cog, sog=sog))
            est = timeline.query(HOUR)
            self.assertEqual(est.kind, SampleKind.EXTRAPOLATED)
            self.assertEqual((est.lat, est.lon), (55., 10.))
            self.assertEqual((est.cog, est.sog), (cog, sog))

    def test_query_accepts_datetimes_and_strings(self):
        ts = to_millis("2021-04-01T08:00:00Z")
        stored = sample(ts, 55., 10.)
        self.timeline.insert(stored)
        self.assertIs(
            self.timeline.query(datetime(2021, 4, 1, 8, tzinfo=timezone.utc)),
            stored
        )
        self.assertIs(self.timeline.query("2021-04-01 08:00:00"), stored)
        self.assertIn(ts, self.timeline)

    def test_retention_hook(self):
        """
        A retention hook may window the timeline,
        the default keeps everything.
        """
        def last_two_seconds(timeline: Timeline) -> None:
            timeline.discard_before(timeline.last().timestamp - 2000)

        windowed = Timeline(retention=last_two_seconds)
        for ts in range(0, 10_000, 1000):
            windowed.insert(sample(ts, 55., 10.))
            self.timeline.insert(sample(ts, 55., 10.))
        self.assertEqual(
            [s.timestamp for s in windowed], [7000, 8000, 9000]
        )
        self.assertEqual(len(self.timeline), 10)

    def test_to_frame(self):
        self.timeline.insert(sample(2000, 56., 11.))
        self.timeline.insert(sample(1000, 55., 10.))
        df = self.timeline.to_frame()
        self.assertEqual(
            list(df.columns),
            ["timestamp", "lat", "lon", "COG", "SOG", "heading"]
        )
        self.assertEqual(list(df["timestamp"]), [1000, 2000])

if __name__ == "__main__":
    unittest.main()

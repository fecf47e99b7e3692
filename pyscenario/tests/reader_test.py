import unittest
from io import StringIO

import pandas as pd

from pyscenario.decode import (
    DecodeFailure, OtherMessage, PositionReport,
    StaticVoyageReport, from_frame, read_messages
)
from pyscenario.structs import (
    COG_NOT_AVAILABLE, HEADING_NOT_AVAILABLE, SOG_NOT_AVAILABLE, BoundingBox
)
from pyscenario.tracker import ScenarioTracker

# 2021-08-02T00:00:00Z
T0 = 1627862400000

class TestReadMessages(unittest.TestCase):

    # Dummy data set
    data = (
        "timestamp,message_id,MMSI,lat,lon,speed,course,heading,"
        "shipname,callsign,ship_type,to_bow,to_stern,to_port,to_starboard,raw_message\n"
        "2021-08-02T00:00:00.000Z,1,219000001,55.0,10.0,12.3,45.6,44,,,,,,,,\n"
        "2021-08-02T00:00:05.000Z,5,219000001,,,,,,EVER GIVEN@@@,H3RC,70,200,100,20,30,\n"
        "2021-08-02T00:00:06.000Z,4,2190000,,,,,,,,,,,,,\n"
        "2021-08-02T00:00:07.000Z,1,notanumber,55.0,10.0,1.0,1.0,1,,,,,,,,\"!AIVDM,bad\"\n"
        "2021-08-02T00:00:08.000Z,18,219000002,,,0.0,0.0,,,,,,,,,\n"
        "2021-08-02T00:00:09.000Z,1,219000003,55.5,10.5,,,,,,,,,,,\n"
    )

    def setUp(self) -> None:
        self.messages = list(read_messages(StringIO(self.data)))

    def test_one_item_per_row(self):
        self.assertEqual(
            [type(m) for m in self.messages],
            [PositionReport, StaticVoyageReport, OtherMessage,
             DecodeFailure, PositionReport, PositionReport]
        )

    def test_position_row(self):
        msg = self.messages[0]
        self.assertEqual(msg.mmsi, 219000001)
        self.assertEqual(msg.timestamp, T0)
        self.assertEqual((msg.lat, msg.lon), (55., 10.))
        self.assertEqual(msg.sog, 123)
        self.assertEqual(msg.cog, 456)
        self.assertEqual(msg.heading, 44)
        self.assertTrue(msg.is_position_valid)

    def test_position_row_without_position(self):
        msg = self.messages[4]
        self.assertEqual(msg.msg_type, 18)
        self.assertFalse(msg.is_position_valid)
        self.assertEqual(msg.heading, HEADING_NOT_AVAILABLE)

    def test_position_row_without_speed_and_course(self):
        """
        Missing speed and course do not cost the position.
        """
        msg = self.messages[5]
        self.assertTrue(msg.is_position_valid)
        self.assertEqual((msg.lat, msg.lon), (55.5, 10.5))
        self.assertEqual(msg.sog, SOG_NOT_AVAILABLE)
        self.assertEqual(msg.cog, COG_NOT_AVAILABLE)
        self.assertEqual(msg.heading, HEADING_NOT_AVAILABLE)

        tracker = ScenarioTracker()
        self.assertEqual(tracker.read_from_stream(self.messages[5:]), 1)
        self.assertEqual(tracker.malformed, 0)
        self.assertEqual(tracker.bounding_box(), BoundingBox(55.5, 55.5, 10.5, 10.5))
        est = tracker.target(219000003).position_at(T0 + 9000 + 60_000)
        self.assertEqual((est.lat, est.lon), (55.5, 10.5))

    def test_static_row(self):
        msg = self.messages[1]
        self.assertEqual(msg.name, "EVER GIVEN@@@")
        self.assertEqual(msg.callsign, "H3RC")
        self.assertEqual(msg.ship_type, 70)
        self.assertEqual(
            (msg.to_bow, msg.to_stern, msg.to_port, msg.to_starboard),
            (200, 100, 20, 30)
        )
        self.assertEqual(msg.timestamp, T0 + 5000)

    def test_other_row(self):
        msg = self.messages[2]
        self.assertEqual((msg.mmsi, msg.msg_type), (2190000, 4))

    def test_malformed_row(self):
        msg = self.messages[3]
        self.assertEqual(msg.raw, "!AIVDM,bad")
        self.assertTrue(msg.reason.startswith("ValueError"))

    def test_from_frame(self):
        df = pd.DataFrame({
            "timestamp": ["2021-08-02T00:00:00Z"],
            "message_id": [3],
            "MMSI": [211000000],
        })
        # Position columns missing entirely
        msgs = list(from_frame(df))
        self.assertEqual(len(msgs), 1)
        self.assertIsInstance(msgs[0], DecodeFailure)
        self.assertTrue(msgs[0].reason.startswith("KeyError"))

if __name__ == "__main__":
    unittest.main()

"""
Tests for the location session cache.
"""

import unittest
from datetime import datetime

from borderwatch.schemas.location import LocationSample
from borderwatch.services.location_cache import LocationCache


def sample(session_id, latitude, longitude):
    return LocationSample(
        session_id=session_id,
        latitude=latitude,
        longitude=longitude,
        timestamp=datetime.utcnow(),
    )


class TestLocationCache(unittest.TestCase):

    def setUp(self):
        self.cache = LocationCache()

    def test_last_write_wins(self):
        first = sample("s1", 34.0, 74.0)
        second = sample("s1", 34.5, 74.5)
        self.cache.update("s1", first)
        self.cache.update("s1", second)

        self.assertEqual(self.cache.get("s1"), second)
        self.assertEqual(self.cache.all(), [second])
        self.assertEqual(len(self.cache), 1)

    def test_missing_session(self):
        self.assertIsNone(self.cache.get("nobody"))

    def test_all_sessions(self):
        self.cache.update("s1", sample("s1", 34.0, 74.0))
        self.cache.update("s2", sample("s2", 33.0, 75.0))

        self.assertEqual({s.session_id for s in self.cache.all()}, {"s1", "s2"})
        self.assertEqual(len(self.cache), 2)


if __name__ == "__main__":
    unittest.main()

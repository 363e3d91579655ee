"""
Tests for the persistence service.
"""

import unittest

from borderwatch.core.database import Base, SessionLocal, engine, init_db
from borderwatch.models.safe_zone import SafeZone, SafeZoneType
from borderwatch.services.storage import Storage, hash_password, verify_password
from borderwatch.utils.geo import Coordinate


class TestPasswords(unittest.TestCase):

    def test_round_trip(self):
        stored = hash_password("correct-horse")
        self.assertTrue(stored.startswith("pbkdf2_sha256$"))
        self.assertNotIn("correct-horse", stored)
        self.assertTrue(verify_password("correct-horse", stored))
        self.assertFalse(verify_password("wrong-horse", stored))

    def test_salts_differ(self):
        self.assertNotEqual(hash_password("correct-horse"), hash_password("correct-horse"))
        self.assertEqual(hash_password("pw", salt="abc"), hash_password("pw", salt="abc"))

    def test_malformed_hash_never_matches(self):
        for stored in ("", "plain-text", "pbkdf2_sha256$many$salt$abc", "pbkdf2_sha256$1$salt$é"):
            with self.subTest(stored=stored):
                self.assertFalse(verify_password("correct-horse", stored))


class TestStorage(unittest.TestCase):

    def setUp(self):
        Base.metadata.drop_all(bind=engine)
        init_db()
        self.db = SessionLocal()
        self.addCleanup(self.db.close)
        self.storage = Storage(self.db)

    def test_created_user_can_be_verified(self):
        user = self.storage.create_user("asha", "correct-horse", full_name="Asha Devi")
        stored = self.storage.get_user_by_username("asha")

        self.assertEqual(stored.id, user.id)
        self.assertTrue(verify_password("correct-horse", stored.password_hash))

    def test_safe_zone_with_bad_location_is_skipped(self):
        self.storage.create_safe_zone(name="Uri Bunker", type=SafeZoneType.BUNKER, location={"lat": 34.09, "lng": 74.05})
        self.db.add(SafeZone(name="Broken", type=SafeZoneType.BUNKER, location={"lat": 123.0, "lng": 500.0}))
        self.db.commit()

        zones = self.storage.get_safe_zones(Coordinate(34.09, 74.05), 50)
        self.assertEqual([zone.name for zone, _ in zones], ["Uri Bunker"])
        self.assertEqual(len(self.storage.get_safe_zones()), 2)


if __name__ == "__main__":
    unittest.main()

"""
Tests for the threat scoring engine.
"""

import unittest
from types import SimpleNamespace

from borderwatch.models.alert import AlertSeverity
from borderwatch.models.threat import ThreatLevel
from borderwatch.services.threat_scorer import (
    MISSING_DATA_PATTERN_CONFIDENCE,
    MISSING_DATA_PREDICTION,
    NEXT_HOURS_PREDICTION,
    NO_LOCATION_FACTOR,
    analyze_text,
    apply_missing_data,
    assess_threat,
    count_by_severity,
)
from borderwatch.utils.geo import Coordinate, ReferencePoint

KASHMIR_SECTOR = Coordinate(34.0837, 74.7973)


def records(*severities):
    return [SimpleNamespace(severity=severity) for severity in severities]


def offset_north(km):
    """A point due north of the Kashmir Sector reference point."""
    return Coordinate(KASHMIR_SECTOR.latitude + km / 111.195, KASHMIR_SECTOR.longitude)


class TestBaseline(unittest.TestCase):

    def test_no_origin_no_records(self):
        assessment = assess_threat(None, [])
        self.assertEqual(assessment.threat_level, ThreatLevel.LOW)
        self.assertEqual(assessment.confidence, 0.5)
        self.assertIn(NO_LOCATION_FACTOR, assessment.risk_factors)
        self.assertTrue(any("Location unavailable" in f for f in assessment.risk_factors))
        self.assertTrue(assessment.recommendations)

    def test_at_reference_point_is_high(self):
        assessment = assess_threat(KASHMIR_SECTOR, [])
        self.assertEqual(assessment.threat_level, ThreatLevel.HIGH)
        self.assertEqual(assessment.confidence, 0.85)
        self.assertEqual(assessment.nearest_reference, "Kashmir Sector")
        self.assertEqual(assessment.distance_km, 0.0)

    def test_proximity_bands(self):
        cases = [
            (1.0, ThreatLevel.HIGH, 0.85),
            (5.0, ThreatLevel.MEDIUM, 0.75),
            (20.0, ThreatLevel.LOW, 0.65),
            (60.0, ThreatLevel.LOW, 0.6),
        ]
        for km, level, confidence in cases:
            with self.subTest(km=km):
                # A single reference point keeps the nearest one fixed
                reference = [ReferencePoint("Kashmir Sector", KASHMIR_SECTOR)]
                assessment = assess_threat(offset_north(km), [], reference)
                self.assertEqual(assessment.threat_level, level)
                self.assertEqual(assessment.confidence, confidence)

    def test_far_away_is_low(self):
        assessment = assess_threat(Coordinate(51.5074, -0.1278), [])
        self.assertEqual(assessment.threat_level, ThreatLevel.LOW)
        self.assertEqual(assessment.confidence, 0.55)
        self.assertNotIn(NO_LOCATION_FACTOR, assessment.risk_factors)

    def test_empty_reference_points(self):
        assessment = assess_threat(KASHMIR_SECTOR, [], [])
        self.assertEqual(assessment.threat_level, ThreatLevel.LOW)
        self.assertEqual(assessment.confidence, 0.5)


class TestEscalation(unittest.TestCase):

    def test_emergency_is_always_critical(self):
        for origin in (None, KASHMIR_SECTOR, Coordinate(-33.86, 151.2)):
            with self.subTest(origin=origin):
                assessment = assess_threat(origin, records(AlertSeverity.EMERGENCY, AlertSeverity.INFO))
                self.assertEqual(assessment.threat_level, ThreatLevel.CRITICAL)
                self.assertEqual(assessment.confidence, 0.9)
                self.assertIn("Active security incidents reported", assessment.risk_factors)

    def test_two_alerts_is_high(self):
        assessment = assess_threat(None, records(AlertSeverity.ALERT, AlertSeverity.ALERT))
        self.assertEqual(assessment.threat_level, ThreatLevel.HIGH)
        self.assertEqual(assessment.confidence, 0.8)

    def test_one_alert_is_medium(self):
        assessment = assess_threat(None, records(AlertSeverity.ALERT))
        self.assertEqual(assessment.threat_level, ThreatLevel.MEDIUM)
        self.assertEqual(assessment.confidence, 0.7)

    def test_three_warnings_is_medium(self):
        assessment = assess_threat(None, records(*[AlertSeverity.WARNING] * 3))
        self.assertEqual(assessment.threat_level, ThreatLevel.MEDIUM)

    def test_two_warnings_do_not_escalate(self):
        assessment = assess_threat(None, records(AlertSeverity.WARNING, AlertSeverity.WARNING))
        self.assertEqual(assessment.threat_level, ThreatLevel.LOW)
        self.assertEqual(assessment.confidence, 0.5)

    def test_escalation_never_lowers_baseline(self):
        assessment = assess_threat(KASHMIR_SECTOR, records(AlertSeverity.ALERT))
        self.assertEqual(assessment.threat_level, ThreatLevel.HIGH)
        self.assertEqual(assessment.confidence, 0.85)

    def test_string_severities_and_unknown_tiers(self):
        counts = count_by_severity(records("emergency", "alert", "bogus", None))
        self.assertEqual(counts[AlertSeverity.EMERGENCY], 1)
        self.assertEqual(counts[AlertSeverity.ALERT], 1)
        self.assertEqual(sum(counts.values()), 2)


class TestMonotonicity(unittest.TestCase):

    def test_moving_closer_never_lowers_level(self):
        record_sets = [
            [],
            records(AlertSeverity.WARNING),
            records(AlertSeverity.ALERT),
            records(AlertSeverity.ALERT, AlertSeverity.ALERT),
        ]
        reference = [ReferencePoint("Kashmir Sector", KASHMIR_SECTOR)]
        distances = [500, 150, 99, 50, 24, 12, 9.5, 5, 1.9, 0.5, 0]
        for active in record_sets:
            previous = None
            for km in distances:
                assessment = assess_threat(offset_north(km), active, reference)
                if previous is not None:
                    self.assertGreaterEqual(assessment.threat_level.rank, previous.threat_level.rank)
                    self.assertGreaterEqual(assessment.confidence, previous.confidence)
                previous = assessment


class TestOutlook(unittest.TestCase):

    def test_outlook_follows_final_level(self):
        cases = [
            (None, [], ThreatLevel.LOW, 0.5),
            (None, records(AlertSeverity.ALERT), ThreatLevel.MEDIUM, 0.6),
            (KASHMIR_SECTOR, [], ThreatLevel.HIGH, 0.7),
            (None, records(AlertSeverity.EMERGENCY), ThreatLevel.CRITICAL, 0.8),
        ]
        for origin, active, level, pattern_confidence in cases:
            with self.subTest(level=level):
                assessment = assess_threat(origin, active)
                self.assertEqual(assessment.threat_level, level)
                self.assertEqual(assessment.pattern_confidence, pattern_confidence)
                self.assertEqual(assessment.next_hours_prediction, NEXT_HOURS_PREDICTION[level])


class TestMissingData(unittest.TestCase):

    def test_nothing_missing_is_unchanged(self):
        assessment = assess_threat(KASHMIR_SECTOR, [])
        self.assertIs(apply_missing_data(assessment, []), assessment)

    def test_cap_lowers_confidence_but_keeps_level(self):
        assessment = assess_threat(KASHMIR_SECTOR, [])
        degraded = apply_missing_data(assessment, ["Feed down"], 0.5)

        self.assertEqual(degraded.threat_level, ThreatLevel.HIGH)
        self.assertEqual(degraded.confidence, 0.5)
        self.assertEqual(degraded.pattern_confidence, MISSING_DATA_PATTERN_CONFIDENCE)
        self.assertEqual(degraded.next_hours_prediction, MISSING_DATA_PREDICTION)
        self.assertEqual(degraded.risk_factors[-1], "Feed down")
        self.assertEqual(assessment.confidence, 0.85)
        self.assertNotIn("Feed down", assessment.risk_factors)

    def test_cap_never_raises_confidence(self):
        assessment = assess_threat(None, [])
        degraded = apply_missing_data(assessment, ["Feed down", "Feed down"], 0.7)
        self.assertEqual(degraded.confidence, 0.5)
        self.assertEqual(degraded.risk_factors.count("Feed down"), 1)


class TestAnalyzeText(unittest.TestCase):

    def test_critical_keywords(self):
        analysis = analyze_text("Heavy artillery explosion near the village")
        self.assertEqual(analysis.threat_level, ThreatLevel.CRITICAL)
        self.assertEqual(analysis.confidence, 0.9)
        self.assertEqual(analysis.category, "shelling")
        self.assertEqual(analysis.immediate_action, "EVACUATE AREA IMMEDIATELY")

    def test_drone_sighting(self):
        analysis = analyze_text("Saw a small drone flying over the fields, looked suspicious")
        self.assertEqual(analysis.threat_level, ThreatLevel.MEDIUM)
        self.assertEqual(analysis.category, "drone")
        self.assertIsNone(analysis.immediate_action)

    def test_nothing_matched(self):
        analysis = analyze_text("Quiet evening")
        self.assertEqual(analysis.threat_level, ThreatLevel.LOW)
        self.assertEqual(analysis.confidence, 0.6)
        self.assertEqual(analysis.category, "unknown")
        self.assertEqual(analysis.source, "keyword")


if __name__ == "__main__":
    unittest.main()

"""
Tests for the external alert feed and the AI processor, and the fallbacks
applied when either is unavailable.
"""

import asyncio
import json
import unittest
from datetime import datetime
from unittest.mock import AsyncMock, patch

from borderwatch.models.alert import AlertSeverity
from borderwatch.models.threat import ThreatLevel
from borderwatch.schemas.alerts import AlertOut
from borderwatch.services.ai_processor import (
    FALLBACK_KEY_POINT,
    FALLBACK_MAX_CONFIDENCE,
    AIProcessor,
    AnalysisResult,
    apply_analysis_fallback,
)
from borderwatch.services.alert_feed import (
    FEED_UNAVAILABLE_FACTOR,
    FEED_UNAVAILABLE_MAX_CONFIDENCE,
    AlertFeedCollector,
    FeedResult,
    apply_feed_fallback,
    categorize,
    is_relevant,
)
from borderwatch.services.threat_scorer import analyze_text

SAMPLE_FEED = """<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0">
  <channel>
    <title>Test World News</title>
    <item>
      <title>Artillery fire reported along the Kashmir border</title>
      <description>&lt;p&gt;Residents were told to &lt;b&gt;shelter&lt;/b&gt; overnight.&lt;/p&gt;</description>
      <link>https://example.com/artillery</link>
      <pubDate>Mon, 05 Jan 2026 10:00:00 GMT</pubDate>
    </item>
    <item>
      <title>Drone sighted near Jammu</title>
      <description>Police are investigating.</description>
      <link>https://example.com/drone</link>
      <pubDate>Mon, 05 Jan 2026 09:00:00 GMT</pubDate>
    </item>
    <item>
      <title>Team wins cricket final</title>
      <description>Celebrations in the city.</description>
      <link>https://example.com/cricket</link>
    </item>
  </channel>
</rss>
"""


def feed_alert(title="Feed item", severity=AlertSeverity.WARNING):
    return AlertOut(title=title, message=title, severity=severity, created_at=datetime.utcnow(), source="Feed")


class TestFeedKeywords(unittest.TestCase):

    def test_categorize(self):
        self.assertEqual(categorize("Missile strike"), AlertSeverity.EMERGENCY)
        self.assertEqual(categorize("Ceasefire violation overnight"), AlertSeverity.ALERT)
        self.assertEqual(categorize("Military exercise planned"), AlertSeverity.WARNING)
        self.assertEqual(categorize("Weather update"), AlertSeverity.INFO)

    def test_relevance(self):
        self.assertTrue(is_relevant("Talks between India and Pakistan"))
        self.assertTrue(is_relevant("Border crossing closed"))
        self.assertFalse(is_relevant("Cricket final tonight"))


class TestFeedParsing(unittest.TestCase):

    def test_parse_feed_keeps_relevant_items(self):
        collector = AlertFeedCollector(feed_urls=[], enabled=True)
        alerts = collector.parse_feed(SAMPLE_FEED, "https://example.com/rss")

        self.assertEqual([a.title for a in alerts], [
            "Artillery fire reported along the Kashmir border",
            "Drone sighted near Jammu",
        ])
        first = alerts[0]
        self.assertEqual(first.severity, AlertSeverity.EMERGENCY)
        self.assertEqual(first.source, "Test World News")
        self.assertEqual(first.url, "https://example.com/artillery")
        self.assertEqual(first.message, "Residents were told to shelter overnight.")
        self.assertEqual(first.created_at, datetime(2026, 1, 5, 10, 0, 0))
        self.assertIsNone(first.id)
        self.assertEqual(alerts[1].severity, AlertSeverity.ALERT)


class TestFeedFetch(unittest.IsolatedAsyncioTestCase):

    async def test_disabled_feed_is_empty_not_failed(self):
        collector = AlertFeedCollector(enabled=False)
        result = await collector.fetch_alerts()
        self.assertTrue(result.ok)
        self.assertEqual(result.items, [])

    async def test_fetch_and_cache(self):
        collector = AlertFeedCollector(feed_urls=["https://example.com/rss"], enabled=True, cache_ttl=60)
        with patch.object(collector, "fetch_url", AsyncMock(return_value=SAMPLE_FEED)) as fetch:
            first = await collector.fetch_alerts()
            second = await collector.fetch_alerts()

        self.assertTrue(first.ok)
        self.assertEqual(len(first.items), 2)
        self.assertEqual(len(second.items), 2)
        fetch.assert_awaited_once()

    async def test_every_source_failing_is_a_failure(self):
        collector = AlertFeedCollector(feed_urls=["https://a.example", "https://b.example"], enabled=True)
        with patch.object(collector, "fetch_url", AsyncMock(side_effect=OSError("unreachable"))):
            result = await collector.fetch_alerts()

        self.assertFalse(result.ok)
        self.assertEqual(result.items, [])
        self.assertIn("unreachable", result.failure)

    async def test_partial_failure_keeps_good_sources(self):
        collector = AlertFeedCollector(feed_urls=["https://a.example", "https://b.example"], enabled=True)
        fetch = AsyncMock(side_effect=[OSError("unreachable"), SAMPLE_FEED])
        with patch.object(collector, "fetch_url", fetch):
            result = await collector.fetch_alerts()

        self.assertTrue(result.ok)
        self.assertEqual(len(result.items), 2)

    async def test_timeout_is_a_failure(self):
        collector = AlertFeedCollector(feed_urls=["https://slow.example"], enabled=True, timeout=0.05)

        async def slow(url):
            await asyncio.sleep(5)
            return SAMPLE_FEED

        with patch.object(collector, "fetch_url", slow):
            result = await collector.fetch_alerts()

        self.assertFalse(result.ok)
        self.assertIn("timed out", result.failure)


class TestFeedFallback(unittest.TestCase):

    def test_success_passes_items_through(self):
        item = feed_alert()
        fallback = apply_feed_fallback(FeedResult([item]))
        self.assertEqual(fallback.alerts, [item])
        self.assertEqual(fallback.risk_factors, [])
        self.assertIsNone(fallback.max_confidence)

    def test_failure_yields_no_records_a_factor_and_a_cap(self):
        fallback = apply_feed_fallback(FeedResult([feed_alert()], "timed out"))
        self.assertEqual(fallback.alerts, [])
        self.assertEqual(fallback.risk_factors, [FEED_UNAVAILABLE_FACTOR])
        self.assertEqual(fallback.max_confidence, FEED_UNAVAILABLE_MAX_CONFIDENCE)


class TestAnalysisFallback(unittest.TestCase):

    def test_success_is_unchanged(self):
        analysis = analyze_text("armed men near the fence").model_copy(update={"source": "ai"})
        self.assertIs(apply_analysis_fallback(AnalysisResult(analysis), "ignored"), analysis)

    def test_failure_uses_keywords_with_capped_confidence(self):
        description = "Explosion heard near the post"
        analysis = apply_analysis_fallback(AnalysisResult(None, "timed out"), description)

        self.assertEqual(analysis.threat_level, ThreatLevel.CRITICAL)
        self.assertEqual(analysis.confidence, FALLBACK_MAX_CONFIDENCE)
        self.assertLess(analysis.confidence, analyze_text(description).confidence)
        self.assertEqual(analysis.source, "fallback")
        self.assertEqual(analysis.key_points[0], FALLBACK_KEY_POINT)

    def test_low_confidence_is_not_raised(self):
        analysis = apply_analysis_fallback(AnalysisResult(None, "disabled"), "quiet night")
        self.assertEqual(analysis.confidence, 0.6)


class TestAIProcessor(unittest.IsolatedAsyncioTestCase):

    async def test_disabled(self):
        processor = AIProcessor(enabled=False)
        result = await processor.analyze_threat("drone overhead")
        self.assertFalse(result.ok)

        image = await processor.analyze_image("aGVsbG8=")
        self.assertEqual(image.threat_assessment.level, "none")
        self.assertEqual(image.location_context, "Manual review required")

    async def test_model_reply_is_parsed(self):
        processor = AIProcessor(enabled=True)
        reply = "Here you go:\n```json\n" + json.dumps({
            "confidence": 1.7,
            "threatLevel": "high",
            "category": "drone",
            "recommendations": ["Take cover", "Report sightings", "Stay indoors", "a", "b", "c"],
            "keyPoints": ["Low altitude drone"],
            "riskFactors": ["Night flight"],
            "immediateAction": None,
        }) + "\n```"
        with patch.object(processor, "_make_ollama_request", AsyncMock(return_value=reply)):
            result = await processor.analyze_threat("drone overhead")

        self.assertTrue(result.ok)
        self.assertEqual(result.analysis.threat_level, ThreatLevel.HIGH)
        self.assertEqual(result.analysis.confidence, 1.0)
        self.assertEqual(len(result.analysis.recommendations), 5)
        self.assertEqual(result.analysis.source, "ai")

    async def test_unknown_level_defaults_to_medium(self):
        processor = AIProcessor(enabled=True)
        reply = json.dumps({"threatLevel": "apocalyptic"})
        with patch.object(processor, "_make_ollama_request", AsyncMock(return_value=reply)):
            result = await processor.analyze_threat("something")

        self.assertEqual(result.analysis.threat_level, ThreatLevel.MEDIUM)
        self.assertEqual(result.analysis.confidence, 0.5)

    async def test_request_error_is_a_failure(self):
        processor = AIProcessor(enabled=True)
        with patch.object(processor, "_make_ollama_request", AsyncMock(side_effect=OSError("refused"))):
            result = await processor.analyze_threat("drone overhead")

        self.assertFalse(result.ok)
        self.assertIn("refused", result.failure)

    async def test_unparseable_reply_is_a_failure(self):
        processor = AIProcessor(enabled=True)
        with patch.object(processor, "_make_ollama_request", AsyncMock(return_value="I cannot help")):
            result = await processor.analyze_threat("drone overhead")

        self.assertFalse(result.ok)

    async def test_mistyped_fields_are_coerced(self):
        processor = AIProcessor(enabled=True)
        reply = json.dumps({
            "confidence": "0.9",
            "threatLevel": "high",
            "category": 7,
            "immediateAction": ["Take cover"],
            "recommendations": "Stay indoors",
        })
        with patch.object(processor, "_make_ollama_request", AsyncMock(return_value=reply)):
            result = await processor.analyze_threat("drone overhead")

        self.assertTrue(result.ok)
        self.assertEqual(result.analysis.category, "7")
        self.assertEqual(result.analysis.confidence, 0.9)
        self.assertIsNone(result.analysis.immediate_action)
        self.assertEqual(result.analysis.recommendations, ["Monitor situation closely", "Report to authorities"])

    async def test_non_numeric_confidence_uses_default(self):
        processor = AIProcessor(enabled=True)
        reply = '{"threatLevel": ["high"], "confidence": NaN, "category": {"kind": "drone"}}'
        with patch.object(processor, "_make_ollama_request", AsyncMock(return_value=reply)):
            result = await processor.analyze_threat("drone overhead")

        self.assertTrue(result.ok)
        self.assertEqual(result.analysis.threat_level, ThreatLevel.MEDIUM)
        self.assertEqual(result.analysis.confidence, 0.5)
        self.assertEqual(result.analysis.category, "unknown")

    async def test_reply_outside_schema_is_a_failure(self):
        processor = AIProcessor(enabled=True)
        with patch.object(processor, "_make_ollama_request", AsyncMock(return_value='{"threatLevel": "high"}')), \
                patch.object(processor, "_to_text_analysis", side_effect=TypeError("bad reply")):
            result = await processor.analyze_threat("Explosion near the post")

        self.assertFalse(result.ok)
        analysis = apply_analysis_fallback(result, "Explosion near the post")
        self.assertEqual(analysis.source, "fallback")
        self.assertEqual(analysis.confidence, FALLBACK_MAX_CONFIDENCE)

    async def test_image_reply_with_flat_assessment(self):
        processor = AIProcessor(enabled=True)
        reply = json.dumps({"description": "a field", "threatAssessment": "low", "detectedObjects": "drone"})
        with patch.object(processor, "_make_ollama_request", AsyncMock(return_value=reply)):
            image = await processor.analyze_image("aGVsbG8=")

        self.assertEqual(image.description, "a field")
        self.assertEqual(image.detected_objects, [])
        self.assertEqual(image.threat_assessment.level, "low")
        self.assertEqual(image.threat_assessment.confidence, 0.5)

    async def test_image_reply_outside_schema_falls_back(self):
        processor = AIProcessor(enabled=True)
        with patch.object(processor, "_make_ollama_request", AsyncMock(return_value='{"description": "x"}')), \
                patch.object(processor, "_to_image_analysis", side_effect=AttributeError("bad reply")):
            image = await processor.analyze_image("aGVsbG8=")

        self.assertEqual(image.location_context, "Manual review required")

    async def test_image_reply_is_parsed(self):
        processor = AIProcessor(enabled=True)
        reply = json.dumps({
            "description": "A quadcopter above a field",
            "detectedObjects": ["drone"],
            "threatAssessment": {"level": "medium", "confidence": 0.6, "reasoning": "Unidentified drone"},
        })
        with patch.object(processor, "_make_ollama_request", AsyncMock(return_value=reply)):
            image = await processor.analyze_image("aGVsbG8=")

        self.assertEqual(image.detected_objects, ["drone"])
        self.assertEqual(image.threat_assessment.level, "medium")
        self.assertIsNone(image.location_context)


if __name__ == "__main__":
    unittest.main()

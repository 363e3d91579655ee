"""
External alert feed for BorderWatch.

This module collects security-related items from public RSS feeds and turns
them into alerts. The feed is best effort: every fetch is bounded by a
timeout and failures are reported back as a value, never raised.
"""

import asyncio
import time
from datetime import datetime
from typing import List, NamedTuple, Optional, Tuple

import aiohttp
import feedparser
from bs4 import BeautifulSoup

from borderwatch.core.config import settings
from borderwatch.core.logging import logger
from borderwatch.models.alert import AlertSeverity
from borderwatch.schemas.alerts import AlertOut

FEED_UNAVAILABLE_FACTOR = "External threat feed unavailable: assessment uses local data only"
FEED_UNAVAILABLE_MAX_CONFIDENCE = 0.5

# Keywords that mark an item as relevant to border security
THREAT_KEYWORDS = [
    "border", "military", "attack", "threat", "security", "alert", "emergency",
    "infiltration", "ceasefire", "violation", "terrorism", "drone", "missile",
    "artillery", "gunfire", "explosion", "evacuation", "curfew",
]

LOCATION_KEYWORDS = [
    "kashmir", "line of control", "india", "pakistan", "punjab", "rajasthan", "gujarat",
    "jammu", "srinagar", "ladakh", "border area", "international border",
]

# Severity tiers, checked from most to least severe
SEVERITY_KEYWORDS = (
    (AlertSeverity.EMERGENCY, ["attack", "explosion", "missile", "artillery", "evacuation", "emergency"]),
    (AlertSeverity.ALERT, ["infiltration", "violation", "drone", "gunfire", "ceasefire", "curfew"]),
    (AlertSeverity.WARNING, ["threat", "security", "military", "border"]),
)


class FeedResult(NamedTuple):
    """Outcome of one feed fetch: the alerts, or why there are none."""
    items: List[AlertOut]
    failure: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.failure is None


def is_relevant(text: str) -> bool:
    text = text.lower()
    return any(k in text for k in THREAT_KEYWORDS) or any(k in text for k in LOCATION_KEYWORDS)


def categorize(text: str) -> AlertSeverity:
    """Map item text to an alert severity tier by keyword."""
    text = text.lower()
    for severity, keywords in SEVERITY_KEYWORDS:
        if any(keyword in text for keyword in keywords):
            return severity
    return AlertSeverity.INFO


class FeedFallback(NamedTuple):
    """Scoring input from one feed result."""
    alerts: List[AlertOut]
    risk_factors: List[str]
    # Upper bound on assessment confidence while the feed is missing
    max_confidence: Optional[float] = None


def apply_feed_fallback(result: FeedResult) -> FeedFallback:
    """
    Turn a feed result into scoring input.

    A failed fetch yields no alerts, the unavailable-feed risk factor and a
    confidence cap, so assessments made without the feed say so and are
    never reported at full confidence.
    """
    if result.ok:
        return FeedFallback(list(result.items), [])
    return FeedFallback([], [FEED_UNAVAILABLE_FACTOR], FEED_UNAVAILABLE_MAX_CONFIDENCE)


def _clean_html(markup: str) -> str:
    if not markup:
        return ""
    return BeautifulSoup(markup, "html.parser").get_text(" ", strip=True)


def _published_at(entry) -> datetime:
    parsed = entry.get("published_parsed") or entry.get("updated_parsed")
    if parsed:
        return datetime(*parsed[:6])
    return datetime.utcnow()


class AlertFeedCollector:
    """
    Collector for public security news feeds.

    Results are cached for FEED_CACHE_TTL seconds so dashboard polling does
    not refetch on every request.
    """

    def __init__(
        self,
        feed_urls: Optional[List[str]] = None,
        timeout: Optional[float] = None,
        cache_ttl: Optional[float] = None,
        max_items: Optional[int] = None,
        enabled: Optional[bool] = None,
    ):
        self.feed_urls = feed_urls if feed_urls is not None else list(settings.ALERT_FEED_URLS)
        self.timeout = timeout if timeout is not None else settings.FEED_TIMEOUT
        self.cache_ttl = cache_ttl if cache_ttl is not None else settings.FEED_CACHE_TTL
        self.max_items = max_items if max_items is not None else settings.MAX_FEED_ITEMS
        self.enabled = enabled if enabled is not None else settings.EXTERNAL_FEED_ENABLED
        self.request_headers = {
            "User-Agent": "Mozilla/5.0 (compatible; BorderWatch/0.1; +threat-assessment)"
        }
        self.session: Optional[aiohttp.ClientSession] = None
        self._cache: Optional[Tuple[float, List[AlertOut]]] = None

    async def initialize(self):
        """Initialize the HTTP session."""
        if self.session is None:
            self.session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.timeout),
                headers=self.request_headers,
            )

    async def close(self):
        """Close the HTTP session."""
        if self.session:
            await self.session.close()
            self.session = None

    async def fetch_url(self, url: str) -> str:
        """
        Fetch a feed document.

        Raises:
            aiohttp.ClientError: On transport errors or a non-200 status.
        """
        await self.initialize()
        async with self.session.get(url) as response:
            if response.status != 200:
                raise aiohttp.ClientResponseError(
                    response.request_info,
                    response.history,
                    status=response.status,
                    message=f"Feed returned status {response.status}",
                )
            return await response.text()

    def parse_feed(self, content: str, default_source: str) -> List[AlertOut]:
        """
        Parse an RSS document into alerts, keeping only relevant items.

        Args:
            content: Raw feed document.
            default_source: Source name when the feed has no title.

        Returns:
            Relevant items as alerts.
        """
        feed = feedparser.parse(content)
        source_name = feed.feed.get("title") or default_source

        alerts = []
        for entry in feed.entries[:self.max_items]:
            title = _clean_html(entry.get("title", ""))
            description = _clean_html(entry.get("summary", ""))
            text = f"{title} {description}"

            if not title or not is_relevant(text):
                continue

            alerts.append(AlertOut(
                title=title[:255],
                message=description or title,
                severity=categorize(text),
                created_at=_published_at(entry),
                source=source_name,
                url=entry.get("link"),
            ))

        return alerts

    async def _collect(self) -> List[AlertOut]:
        items: List[AlertOut] = []
        errors = []

        for url in self.feed_urls:
            try:
                content = await self.fetch_url(url)
                parsed = self.parse_feed(content, url)
                logger.info(f"Collected {len(parsed)} relevant items from {url}")
                items.extend(parsed)
            except Exception as e:
                logger.warning(f"Error collecting feed {url}: {e}")
                errors.append(f"{url}: {e}")

        if self.feed_urls and len(errors) == len(self.feed_urls):
            raise RuntimeError("; ".join(errors))

        return items

    async def fetch_alerts(self) -> FeedResult:
        """
        Fetch current alerts from all configured feeds.

        Returns:
            FeedResult with the alerts, or a failure reason when every feed
            failed or the fetch timed out.
        """
        if not self.enabled:
            return FeedResult([])

        if self._cache and time.monotonic() - self._cache[0] < self.cache_ttl:
            return FeedResult(list(self._cache[1]))

        try:
            items = await asyncio.wait_for(self._collect(), timeout=self.timeout)
        except asyncio.TimeoutError:
            logger.error(f"Alert feed timed out after {self.timeout} seconds")
            return FeedResult([], f"timed out after {self.timeout} seconds")
        except Exception as e:
            logger.error(f"Alert feed unavailable: {e}")
            return FeedResult([], str(e))

        self._cache = (time.monotonic(), items)
        return FeedResult(list(items))

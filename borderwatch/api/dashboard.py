"""
Dashboard API endpoints for BorderWatch.
"""

from fastapi import APIRouter, Depends

from borderwatch.api.alerts import gather_alerts
from borderwatch.api.deps import get_alert_feed, get_storage
from borderwatch.schemas.assessment import DashboardStats
from borderwatch.services.alert_feed import AlertFeedCollector
from borderwatch.services.storage import Storage
from borderwatch.services.threat_scorer import apply_missing_data, assess_threat

router = APIRouter()


@router.get("/stats", response_model=DashboardStats)
async def dashboard_stats(
    storage: Storage = Depends(get_storage),
    feed: AlertFeedCollector = Depends(get_alert_feed),
):
    """
    Headline numbers for the dashboard.

    aiConfidence is the confidence, as a percentage, of the region-wide
    assessment over the current alerts, capped while the feed is down.
    """
    alerts, fallback = await gather_alerts(storage, feed)
    assessment = apply_missing_data(assess_threat(None, alerts), fallback.risk_factors, fallback.max_confidence)

    return DashboardStats(
        active_threats=storage.get_active_threat_count(),
        pending_reports=storage.get_pending_reports_count(),
        safe_zones=storage.get_safe_zone_count(),
        ai_confidence=round(assessment.confidence * 100, 1),
    )

"""
Threat prediction API for BorderWatch.
"""

from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query

from borderwatch.api.alerts import gather_alerts
from borderwatch.api.deps import get_alert_feed, get_storage
from borderwatch.schemas.assessment import ThreatAssessment
from borderwatch.services.alert_feed import AlertFeedCollector
from borderwatch.services.storage import Storage
from borderwatch.services.threat_scorer import apply_missing_data, assess_threat
from borderwatch.utils.geo import Coordinate

router = APIRouter()


@router.get("/threat-prediction", response_model=ThreatAssessment)
async def threat_prediction(
    lat: Optional[float] = Query(None, ge=-90, le=90, description="Latitude of the requesting user"),
    lng: Optional[float] = Query(None, ge=-180, le=180, description="Longitude of the requesting user"),
    storage: Storage = Depends(get_storage),
    feed: AlertFeedCollector = Depends(get_alert_feed),
):
    """
    Assess the current threat level at a location.

    Both coordinates must be given together; without them the assessment
    covers the region as a whole at reduced confidence.

    Returns:
        ThreatAssessment for the location.
    """
    if (lat is None) != (lng is None):
        raise HTTPException(status_code=422, detail="lat and lng must be provided together")

    origin = Coordinate(lat, lng) if lat is not None else None
    alerts, fallback = await gather_alerts(storage, feed)

    return apply_missing_data(assess_threat(origin, alerts), fallback.risk_factors, fallback.max_confidence)

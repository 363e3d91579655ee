"""
Alert API endpoints for BorderWatch.

This module serves the live alert list, which merges persisted alerts with
items from the external feed, and lets operators raise new alerts.
"""

from typing import List, Tuple
from fastapi import APIRouter, Depends, HTTPException, Path

from borderwatch.api.deps import get_alert_feed, get_hub, get_storage
from borderwatch.core.logging import logger
from borderwatch.schemas.alerts import AlertCreate, AlertOut
from borderwatch.schemas.events import NewAlertEvent
from borderwatch.services.alert_feed import AlertFeedCollector, FeedFallback, apply_feed_fallback
from borderwatch.services.broadcast_hub import BroadcastHub
from borderwatch.services.storage import Storage

# Create router
router = APIRouter()


async def gather_alerts(storage: Storage, feed: AlertFeedCollector) -> Tuple[List[AlertOut], FeedFallback]:
    """
    Collect every currently active alert.

    Args:
        storage: Persistence service.
        feed: External feed collector.

    Returns:
        Alerts newest first, and the feed fallback describing what was
        missing if the feed could not be read.
    """
    local_alerts = [AlertOut.model_validate(alert) for alert in storage.get_active_alerts()]
    fallback = apply_feed_fallback(await feed.fetch_alerts())

    alerts = sorted(local_alerts + fallback.alerts, key=lambda a: a.created_at, reverse=True)
    return alerts, fallback


@router.get("", response_model=List[AlertOut])
async def list_alerts(
    storage: Storage = Depends(get_storage),
    feed: AlertFeedCollector = Depends(get_alert_feed),
):
    """
    List active, unexpired alerts from the database and the external feed.

    Returns:
        Alerts sorted by creation time, newest first.
    """
    alerts, _ = await gather_alerts(storage, feed)
    return alerts


@router.post("", response_model=AlertOut)
async def create_alert(
    payload: AlertCreate,
    storage: Storage = Depends(get_storage),
    hub: BroadcastHub = Depends(get_hub),
):
    """
    Create an alert and push it to every connected client.
    """
    if payload.threat_id is not None and storage.get_threat(payload.threat_id) is None:
        raise HTTPException(status_code=404, detail="Threat not found")

    alert = AlertOut.model_validate(storage.create_alert(**payload.model_dump()))
    delivered = await hub.broadcast(NewAlertEvent(data=alert))
    logger.info(f"Alert {alert.id} pushed to {delivered} clients")

    return alert


@router.get("/{alert_id}", response_model=AlertOut)
async def get_alert(
    alert_id: int = Path(..., description="The ID of the alert to retrieve"),
    storage: Storage = Depends(get_storage),
):
    """
    Get a specific alert by ID.

    Raises:
        HTTPException: If alert not found.
    """
    alert = storage.get_alert(alert_id)
    if not alert:
        raise HTTPException(status_code=404, detail="Alert not found")

    return alert

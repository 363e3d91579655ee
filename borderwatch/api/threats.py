"""
Threat API endpoints for BorderWatch.

This module provides endpoints for threat data management.
"""

from typing import List
from fastapi import APIRouter, Depends, HTTPException, Path, Query

from borderwatch.api.deps import get_ai_processor, get_hub, get_storage
from borderwatch.core.logging import logger
from borderwatch.models.alert import AlertSeverity
from borderwatch.models.threat import ThreatLevel
from borderwatch.schemas.alerts import AlertOut
from borderwatch.schemas.events import ThreatAlertEvent
from borderwatch.schemas.threats import ThreatAlertPayload, ThreatCreate, ThreatOut
from borderwatch.services.ai_processor import AIProcessor, apply_analysis_fallback
from borderwatch.services.broadcast_hub import BroadcastHub
from borderwatch.services.storage import Storage

# Create router
router = APIRouter()

# Threat severities that raise an alert automatically
ALERTING_SEVERITIES = {
    ThreatLevel.HIGH: AlertSeverity.ALERT,
    ThreatLevel.CRITICAL: AlertSeverity.EMERGENCY,
}


@router.get("", response_model=List[ThreatOut])
async def list_threats(
    limit: int = Query(50, ge=1, le=500),
    storage: Storage = Depends(get_storage),
):
    """
    List the most recent threats.

    Args:
        limit: Maximum number of items to return.

    Returns:
        Threats, newest first.
    """
    return storage.get_threats(limit)


@router.get("/{threat_id}", response_model=ThreatOut)
async def get_threat(
    threat_id: int = Path(..., description="The ID of the threat to retrieve"),
    storage: Storage = Depends(get_storage),
):
    """
    Get a specific threat by ID.

    Raises:
        HTTPException: If threat not found.
    """
    threat = storage.get_threat(threat_id)
    if not threat:
        raise HTTPException(status_code=404, detail="Threat not found")

    return threat


@router.post("", response_model=ThreatOut)
async def create_threat(
    payload: ThreatCreate,
    storage: Storage = Depends(get_storage),
    hub: BroadcastHub = Depends(get_hub),
    ai: AIProcessor = Depends(get_ai_processor),
):
    """
    Record a threat, enriched with text analysis.

    High and critical threats also raise a linked alert, which is pushed to
    every connected client as a threat_alert event.
    """
    analysis = apply_analysis_fallback(await ai.analyze_threat(payload.description), payload.description)

    fields = payload.model_dump(exclude={"meta"})
    fields["confidence"] = analysis.confidence
    fields["metadata_"] = {
        **(payload.meta or {}),
        "aiAnalysis": analysis.model_dump(mode="json", by_alias=True),
    }
    threat = storage.create_threat(**fields)

    alert_severity = ALERTING_SEVERITIES.get(threat.severity)
    if alert_severity is not None:
        alert = storage.create_alert(
            threat_id=threat.id,
            title=f"{threat.severity.value.upper()} THREAT DETECTED",
            message=threat.title,
            severity=alert_severity,
            target_area=threat.location,
        )
        event = ThreatAlertEvent(data=ThreatAlertPayload(
            threat=ThreatOut.model_validate(threat),
            alert=AlertOut.model_validate(alert),
        ))
        delivered = await hub.broadcast(event)
        logger.info(f"Threat {threat.id} raised alert {alert.id}, pushed to {delivered} clients")

    return threat

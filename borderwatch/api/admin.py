"""
Admin triage API for BorderWatch.

Verify or reject reports, deactivate alerts and close threats. Protected by
the X-API-Key header when ADMIN_API_KEY is configured.
"""

from fastapi import APIRouter, Depends, HTTPException, Path

from borderwatch.api.deps import get_storage
from borderwatch.core.logging import logger
from borderwatch.schemas.alerts import AlertOut, AlertUpdate
from borderwatch.schemas.reports import ReportOut, ReportUpdate
from borderwatch.schemas.threats import ThreatOut, ThreatUpdate
from borderwatch.services.storage import Storage

router = APIRouter()


@router.patch("/reports/{report_id}", response_model=ReportOut)
async def update_report(
    payload: ReportUpdate,
    report_id: int = Path(..., description="The ID of the report to triage"),
    storage: Storage = Depends(get_storage),
):
    """
    Update a report's status, verifier and admin comment.

    Raises:
        HTTPException: If the report or the verifying user does not exist.
    """
    updates = payload.model_dump(exclude_unset=True)
    if updates.get("status") is None:
        updates.pop("status", None)
    if updates.get("verified_by") is not None and not storage.get_user(updates["verified_by"]):
        raise HTTPException(status_code=404, detail="User not found")

    report = storage.update_report(report_id, updates)
    if not report:
        raise HTTPException(status_code=404, detail="Report not found")

    logger.info(f"Report {report_id} updated: {updates}")
    return report


@router.patch("/alerts/{alert_id}", response_model=AlertOut)
async def update_alert(
    payload: AlertUpdate,
    alert_id: int = Path(..., description="The ID of the alert to update"),
    storage: Storage = Depends(get_storage),
):
    """
    Deactivate an alert or change its expiry.
    """
    updates = payload.model_dump(exclude_unset=True)
    if updates.get("is_active") is None:
        updates.pop("is_active", None)

    alert = storage.update_alert(alert_id, updates)
    if not alert:
        raise HTTPException(status_code=404, detail="Alert not found")

    logger.info(f"Alert {alert_id} updated: {updates}")
    return alert


@router.patch("/threats/{threat_id}", response_model=ThreatOut)
async def update_threat(
    payload: ThreatUpdate,
    threat_id: int = Path(..., description="The ID of the threat to update"),
    storage: Storage = Depends(get_storage),
):
    threat = storage.update_threat(threat_id, payload.model_dump())
    if not threat:
        raise HTTPException(status_code=404, detail="Threat not found")

    logger.info(f"Threat {threat_id} marked {threat.status.value}")
    return threat

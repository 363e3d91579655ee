"""
Report API endpoints for BorderWatch.

Civilians submit reports as multipart forms with optional media. Each report
is enriched with text and image analysis; critical reports the analysis is
confident about are escalated to a threat straight away.
"""

import base64
import json
import os
import re
import time
from typing import Any, Dict, List, Optional, Tuple
from fastapi import APIRouter, Depends, File, Form, HTTPException, Path, Query, UploadFile
from pydantic import ValidationError

from borderwatch.api.deps import get_ai_processor, get_hub, get_storage
from borderwatch.core.config import settings
from borderwatch.core.logging import logger
from borderwatch.models.threat import ThreatLevel, ThreatSource, ThreatType
from borderwatch.schemas.events import UrgentReportEvent
from borderwatch.schemas.reports import (
    ReportCommentCreate,
    ReportCommentOut,
    ReportCreate,
    ReportOut,
    UrgentReportPayload,
)
from borderwatch.schemas.threats import ThreatOut
from borderwatch.services.ai_processor import AIProcessor, apply_analysis_fallback
from borderwatch.services.broadcast_hub import BroadcastHub
from borderwatch.services.storage import Storage

router = APIRouter()

ALLOWED_MEDIA_EXTENSIONS = {".jpeg", ".jpg", ".png", ".mp4", ".mov", ".avi"}
ESCALATION_CONFIDENCE = 0.8


def _validation_message(error: ValidationError) -> str:
    return "; ".join(
        f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in error.errors()
    )


def _safe_filename(filename: str) -> str:
    name = os.path.basename(filename or "upload")
    return re.sub(r"[^A-Za-z0-9._-]", "_", name)


async def _store_media(files: List[UploadFile], ai: AIProcessor) -> Tuple[List[str], Optional[Dict[str, Any]]]:
    """
    Validate and save uploaded media.

    Returns:
        The public URLs of the stored files and the analysis of the last
        image, if any image was uploaded.

    Raises:
        HTTPException: If there are too many files, or a file has the wrong
            type or is too large.
    """
    if len(files) > settings.MAX_UPLOAD_FILES:
        raise HTTPException(status_code=400, detail=f"At most {settings.MAX_UPLOAD_FILES} media files allowed")

    # Check everything before writing anything
    contents = []
    for upload in files:
        extension = os.path.splitext(upload.filename or "")[1].lower()
        if extension not in ALLOWED_MEDIA_EXTENSIONS:
            raise HTTPException(status_code=400, detail="Only image and video files are allowed")
        data = await upload.read()
        if len(data) > settings.MAX_UPLOAD_BYTES:
            raise HTTPException(status_code=400, detail=f"{upload.filename} exceeds the upload size limit")
        contents.append((upload, data))

    urls = []
    image_analysis = None
    for upload, data in contents:
        filename = f"{int(time.time() * 1000)}-{_safe_filename(upload.filename)}"
        with open(os.path.join(settings.UPLOAD_DIR, filename), "wb") as f:
            f.write(data)
        urls.append(f"/uploads/{filename}")

        if (upload.content_type or "").startswith("image/"):
            analysis = await ai.analyze_image(base64.b64encode(data).decode("ascii"))
            image_analysis = analysis.model_dump(mode="json", by_alias=True)

    return urls, image_analysis


@router.get("", response_model=List[ReportOut])
async def list_reports(
    user_id: Optional[int] = Query(None, alias="userId"),
    storage: Storage = Depends(get_storage),
):
    """
    List reports, newest first, optionally for one user.
    """
    return storage.get_reports(user_id)


@router.get("/{report_id}", response_model=ReportOut)
async def get_report(
    report_id: int = Path(..., description="The ID of the report to retrieve"),
    storage: Storage = Depends(get_storage),
):
    report = storage.get_report(report_id)
    if not report:
        raise HTTPException(status_code=404, detail="Report not found")

    return report


@router.post("", response_model=ReportOut)
async def submit_report(
    threat_type: str = Form(..., alias="threatType"),
    description: str = Form(...),
    urgency_level: str = Form(..., alias="urgencyLevel"),
    user_id: Optional[int] = Form(None, alias="userId"),
    location: Optional[str] = Form(None, description="JSON object with lat, lng and address"),
    is_anonymous: str = Form("false", alias="isAnonymous"),
    media: Optional[List[UploadFile]] = File(None),
    storage: Storage = Depends(get_storage),
    hub: BroadcastHub = Depends(get_hub),
    ai: AIProcessor = Depends(get_ai_processor),
):
    """
    Submit a report with optional media attachments.

    Raises:
        HTTPException: 400 if the form fields or media are invalid.
    """
    try:
        report_in = ReportCreate(
            user_id=user_id,
            threat_type=threat_type,
            description=description,
            location=json.loads(location) if location else None,
            urgency_level=urgency_level,
            is_anonymous=is_anonymous.lower() == "true",
        )
    except json.JSONDecodeError:
        raise HTTPException(status_code=400, detail="location must be a JSON object")
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=_validation_message(e))

    if report_in.user_id is not None and storage.get_user(report_in.user_id) is None:
        raise HTTPException(status_code=404, detail="User not found")

    media_urls, image_analysis = await _store_media(media or [], ai)

    text_analysis = apply_analysis_fallback(
        await ai.analyze_threat(report_in.description), report_in.description
    )
    ai_analysis = {"textAnalysis": text_analysis.model_dump(mode="json", by_alias=True)}
    if image_analysis is not None:
        ai_analysis["imageAnalysis"] = image_analysis

    report = storage.create_report(
        **report_in.model_dump(),
        media=media_urls,
        ai_analysis=ai_analysis,
    )

    if text_analysis.confidence > ESCALATION_CONFIDENCE and report_in.urgency_level == ThreatLevel.CRITICAL:
        try:
            threat_kind = ThreatType(report_in.threat_type)
        except ValueError:
            threat_kind = ThreatType.OTHER

        threat = storage.create_threat(
            type=threat_kind,
            severity=ThreatLevel.HIGH,
            title=f"Reported: {report_in.threat_type}",
            description=report_in.description,
            location=report.location,
            source=ThreatSource.USER,
            confidence=text_analysis.confidence,
        )
        await hub.broadcast(UrgentReportEvent(data=UrgentReportPayload(
            report=ReportOut.model_validate(report),
            threat=ThreatOut.model_validate(threat),
        )))
        logger.warning(f"Report {report.id} escalated to threat {threat.id}")

    return report


@router.get("/{report_id}/comments", response_model=List[ReportCommentOut])
async def list_comments(
    report_id: int = Path(...),
    storage: Storage = Depends(get_storage),
):
    if not storage.get_report(report_id):
        raise HTTPException(status_code=404, detail="Report not found")

    return storage.get_report_comments(report_id)


@router.post("/{report_id}/comments", response_model=ReportCommentOut)
async def create_comment(
    payload: ReportCommentCreate,
    report_id: int = Path(...),
    storage: Storage = Depends(get_storage),
):
    """
    Add a comment to a report.

    Raises:
        HTTPException: If the report or the commenting user does not exist.
    """
    if not storage.get_report(report_id):
        raise HTTPException(status_code=404, detail="Report not found")
    if not storage.get_user(payload.user_id):
        raise HTTPException(status_code=404, detail="User not found")

    return storage.create_report_comment(report_id, **payload.model_dump())

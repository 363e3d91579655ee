"""
Report schemas for BorderWatch.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional
from pydantic import Field

from borderwatch.models.report import ReportStatus
from borderwatch.models.threat import ThreatLevel
from borderwatch.schemas.common import APIModel, GeoLocation
from borderwatch.schemas.threats import ThreatOut


class ReportCreate(APIModel):
    user_id: Optional[int] = None
    threat_type: str = Field(..., min_length=1, max_length=50)
    description: str = Field(..., min_length=1)
    location: Optional[GeoLocation] = None
    urgency_level: ThreatLevel
    is_anonymous: bool = False


class ReportUpdate(APIModel):
    """Admin triage of a report."""
    status: Optional[ReportStatus] = None
    verified_by: Optional[int] = None
    admin_comment: Optional[str] = None


class ReportOut(APIModel):
    id: int
    user_id: Optional[int] = None
    threat_type: str
    description: str
    location: Optional[GeoLocation] = None
    urgency_level: ThreatLevel
    media: List[str] = []
    is_anonymous: bool
    status: ReportStatus
    ai_analysis: Optional[Dict[str, Any]] = None
    verified_by: Optional[int] = None
    admin_comment: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class ReportCommentCreate(APIModel):
    user_id: int
    comment: str = Field(..., min_length=1)
    is_admin_response: bool = False


class ReportCommentOut(APIModel):
    id: int
    report_id: int
    user_id: int
    comment: str
    is_admin_response: bool
    created_at: datetime


class UrgentReportPayload(APIModel):
    report: ReportOut
    threat: ThreatOut

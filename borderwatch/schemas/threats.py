"""
Threat schemas for BorderWatch.
"""

from datetime import datetime
from typing import Any, Dict, Optional
from pydantic import AliasChoices, Field

from borderwatch.models.threat import ThreatLevel, ThreatSource, ThreatStatus, ThreatType
from borderwatch.schemas.alerts import AlertOut
from borderwatch.schemas.common import APIModel, GeoLocation


class ThreatCreate(APIModel):
    type: ThreatType = ThreatType.OTHER
    severity: ThreatLevel
    title: str = Field(..., min_length=1, max_length=255)
    description: str = Field(..., min_length=1)
    location: Optional[GeoLocation] = None
    confidence: Optional[float] = Field(None, ge=0, le=1)
    source: ThreatSource = ThreatSource.SYSTEM
    meta: Optional[Dict[str, Any]] = Field(
        None,
        validation_alias=AliasChoices("metadata_", "metadata"),
        serialization_alias="metadata",
    )


class ThreatUpdate(APIModel):
    status: ThreatStatus


class ThreatOut(APIModel):
    id: int
    type: ThreatType
    severity: ThreatLevel
    title: str
    description: str
    location: Optional[GeoLocation] = None
    status: ThreatStatus
    confidence: Optional[float] = None
    source: ThreatSource
    meta: Optional[Dict[str, Any]] = Field(
        None,
        validation_alias=AliasChoices("metadata_", "metadata"),
        serialization_alias="metadata",
    )
    created_at: datetime
    updated_at: datetime


class ThreatAlertPayload(APIModel):
    threat: ThreatOut
    alert: AlertOut

"""
Alert schemas for BorderWatch.
"""

from datetime import datetime, timezone
from typing import Optional
from pydantic import Field, field_validator

from borderwatch.models.alert import AlertSeverity
from borderwatch.schemas.common import APIModel, TargetArea

LOCAL_SOURCE = "local"


def to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Stored timestamps are naive UTC; convert aware input to match."""
    if value is not None and value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


class AlertCreate(APIModel):
    threat_id: Optional[int] = None
    title: str = Field(..., min_length=1, max_length=255)
    message: str = Field(..., min_length=1)
    severity: AlertSeverity = AlertSeverity.INFO
    target_area: Optional[TargetArea] = None
    expires_at: Optional[datetime] = None

    @field_validator("expires_at")
    @classmethod
    def normalize_expiry(cls, v: Optional[datetime]) -> Optional[datetime]:
        return to_naive_utc(v)


class AlertUpdate(APIModel):
    is_active: Optional[bool] = None
    expires_at: Optional[datetime] = None

    @field_validator("expires_at")
    @classmethod
    def normalize_expiry(cls, v: Optional[datetime]) -> Optional[datetime]:
        return to_naive_utc(v)


class AlertOut(APIModel):
    """
    An alert as clients see it.

    Alerts from the external feed have no id and carry the feed name in
    source; persisted alerts have source "local".
    """
    id: Optional[int] = None
    threat_id: Optional[int] = None
    title: str
    message: str
    severity: AlertSeverity
    target_area: Optional[TargetArea] = None
    is_active: bool = True
    expires_at: Optional[datetime] = None
    created_at: datetime
    source: str = LOCAL_SOURCE
    url: Optional[str] = None

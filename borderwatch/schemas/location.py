"""
Location tracking schemas for BorderWatch.
"""

from datetime import datetime
from typing import Optional
from pydantic import Field

from borderwatch.schemas.common import APIModel


class LocationUpdate(APIModel):
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
    accuracy: Optional[float] = Field(None, ge=0)
    timestamp: Optional[datetime] = None


class LocationSample(APIModel):
    """Latest known position of one client session."""
    session_id: str
    latitude: float
    longitude: float
    accuracy: Optional[float] = None
    timestamp: datetime


class LocationAck(APIModel):
    success: bool
    timestamp: datetime

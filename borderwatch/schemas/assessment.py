"""
Threat assessment schemas for BorderWatch.
"""

from datetime import datetime
from typing import List, Optional
from pydantic import Field

from borderwatch.models.threat import ThreatLevel
from borderwatch.schemas.common import APIModel


class ThreatAssessment(APIModel):
    """
    Risk level for a location, derived from proximity to the border and the
    currently active alerts. Never persisted.
    """
    threat_level: ThreatLevel
    confidence: float = Field(..., ge=0, le=1)
    risk_factors: List[str] = []
    recommendations: List[str] = []
    computed_at: datetime
    nearest_reference: Optional[str] = None
    distance_km: Optional[float] = None
    # Outlook for the next few hours
    pattern_confidence: float = Field(..., ge=0, le=1)
    next_hours_prediction: str


class TextAnalysis(APIModel):
    """Threat analysis of a free-text description."""
    threat_level: ThreatLevel
    confidence: float = Field(..., ge=0, le=1)
    category: str = "unknown"
    recommendations: List[str] = []
    key_points: List[str] = []
    risk_factors: List[str] = []
    immediate_action: Optional[str] = None
    source: str = "keyword"


class ImageThreatAssessment(APIModel):
    level: str  # none, low, medium, high, critical
    confidence: float = Field(..., ge=0, le=1)
    reasoning: str


class ImageAnalysis(APIModel):
    description: str
    detected_objects: List[str] = []
    threat_assessment: ImageThreatAssessment
    location_context: Optional[str] = None


class DashboardStats(APIModel):
    active_threats: int
    pending_reports: int
    safe_zones: int
    ai_confidence: float

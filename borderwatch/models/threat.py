"""
Threat model for BorderWatch.

This module provides the SQLAlchemy model for threat data.
"""

import enum
from datetime import datetime
from sqlalchemy import Column, String, Text, Float, Integer, DateTime, Enum, JSON

from borderwatch.core.database import Base


class ThreatType(str, enum.Enum):
    """Enumeration of threat types."""
    DRONE = "drone"
    CYBER = "cyber"
    GROUND = "ground"
    AIR = "air"
    INFILTRATION = "infiltration"
    SHELLING = "shelling"
    OTHER = "other"


class ThreatLevel(str, enum.Enum):
    """Ordinal threat levels, lowest first."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"

    @property
    def rank(self) -> int:
        return list(ThreatLevel).index(self)


class ThreatStatus(str, enum.Enum):
    """Enumeration of threat statuses."""
    ACTIVE = "active"
    INVESTIGATING = "investigating"
    RESOLVED = "resolved"


class ThreatSource(str, enum.Enum):
    """Where a threat record came from."""
    SYSTEM = "system"
    USER = "user"
    AI = "ai"


class Threat(Base):
    """
    Threat model representing a confirmed or suspected security threat.
    """
    __tablename__ = "threats"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    type = Column(Enum(ThreatType), nullable=False, default=ThreatType.OTHER, index=True)
    severity = Column(Enum(ThreatLevel), nullable=False, default=ThreatLevel.MEDIUM, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)

    # { lat, lng, address }
    location = Column(JSON, nullable=True)

    status = Column(Enum(ThreatStatus), nullable=False, default=ThreatStatus.ACTIVE, index=True)
    confidence = Column(Float, nullable=True)  # 0.0-1.0
    source = Column(Enum(ThreatSource), nullable=False, default=ThreatSource.SYSTEM)
    metadata_ = Column("metadata", JSON, nullable=True)

    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f"<Threat {self.id}: {self.title}>"

"""
Safe zone model for BorderWatch.
"""

import enum
from datetime import datetime
from sqlalchemy import Column, String, Integer, Boolean, DateTime, Enum, JSON

from borderwatch.core.database import Base


class SafeZoneType(str, enum.Enum):
    """Enumeration of shelter types."""
    BUNKER = "bunker"
    HOSPITAL = "hospital"
    MILITARY_POST = "military_post"
    EVACUATION_CENTER = "evacuation_center"


class SafeZone(Base):
    __tablename__ = "safe_zones"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    type = Column(Enum(SafeZoneType), nullable=False)

    # { lat, lng, address }
    location = Column(JSON, nullable=False)

    capacity = Column(Integer, nullable=True)
    facilities = Column(JSON, nullable=False, default=list)
    contact = Column(String(100), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True, index=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    def __repr__(self):
        return f"<SafeZone {self.id}: {self.name}>"

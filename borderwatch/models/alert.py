"""
Alert model for BorderWatch.

This module provides the SQLAlchemy model for broadcast alerts.
"""

import enum
from datetime import datetime
from sqlalchemy import Column, String, Text, Integer, Boolean, DateTime, Enum, JSON, ForeignKey

from borderwatch.core.database import Base


class AlertSeverity(str, enum.Enum):
    """Ordinal alert severity tiers, lowest first."""
    INFO = "info"
    WARNING = "warning"
    ALERT = "alert"
    EMERGENCY = "emergency"


class Alert(Base):
    """
    Alert model. Alerts are deactivated or expire, they are never deleted.
    """
    __tablename__ = "alerts"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    threat_id = Column(Integer, ForeignKey("threats.id"), nullable=True)
    title = Column(String(255), nullable=False)
    message = Column(Text, nullable=False)
    severity = Column(Enum(AlertSeverity), nullable=False, default=AlertSeverity.INFO, index=True)

    # { lat, lng, radius, address }
    target_area = Column(JSON, nullable=True)

    is_active = Column(Boolean, nullable=False, default=True, index=True)
    expires_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow, index=True)

    def __repr__(self):
        return f"<Alert {self.id}: {self.severity.value} {self.title}>"

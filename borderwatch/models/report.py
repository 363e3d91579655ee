"""
Report models for BorderWatch.

This module provides the SQLAlchemy models for civilian threat reports and
the comments attached to them.
"""

import enum
from datetime import datetime
from sqlalchemy import Column, String, Text, Integer, Boolean, DateTime, Enum, JSON, ForeignKey

from borderwatch.core.database import Base
from borderwatch.models.threat import ThreatLevel


class ReportStatus(str, enum.Enum):
    """Enumeration of report triage statuses."""
    PENDING = "pending"
    VERIFIED = "verified"
    REJECTED = "rejected"
    INVESTIGATING = "investigating"


class Report(Base):
    """
    Report submitted by a civilian, triaged by an admin.
    """
    __tablename__ = "reports"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=True, index=True)
    threat_type = Column(String(50), nullable=False)
    description = Column(Text, nullable=False)

    # { lat, lng, address }
    location = Column(JSON, nullable=True)

    urgency_level = Column(Enum(ThreatLevel), nullable=False, default=ThreatLevel.LOW)
    media = Column(JSON, nullable=False, default=list)  # list of /uploads/ urls
    is_anonymous = Column(Boolean, nullable=False, default=False)
    status = Column(Enum(ReportStatus), nullable=False, default=ReportStatus.PENDING, index=True)
    ai_analysis = Column(JSON, nullable=True)
    verified_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    admin_comment = Column(Text, nullable=True)

    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f"<Report {self.id}: {self.threat_type} ({self.status.value})>"


class ReportComment(Base):
    """
    Comment on a report, from the reporter or an admin.
    """
    __tablename__ = "report_comments"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    report_id = Column(Integer, ForeignKey("reports.id"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    comment = Column(Text, nullable=False)
    is_admin_response = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    def __repr__(self):
        return f"<ReportComment {self.id} on report {self.report_id}>"

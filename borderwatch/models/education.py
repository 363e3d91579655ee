"""
Education resource model for BorderWatch.
"""

import enum
from datetime import datetime
from sqlalchemy import Column, String, Text, Integer, Boolean, DateTime, Enum

from borderwatch.core.database import Base


class ResourceType(str, enum.Enum):
    ARTICLE = "article"
    VIDEO = "video"
    INTERACTIVE = "interactive"
    GUIDE = "guide"


class ResourcePriority(str, enum.Enum):
    """Resource priority, lowest first."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    ESSENTIAL = "essential"

    @property
    def rank(self) -> int:
        return list(ResourcePriority).index(self)


class EducationResource(Base):
    __tablename__ = "education_resources"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    type = Column(Enum(ResourceType), nullable=False)
    category = Column(String(50), nullable=False, index=True)  # drone_response, evacuation, ...
    content = Column(Text, nullable=True)  # article body or video url
    duration = Column(Integer, nullable=True)  # minutes
    priority = Column(Enum(ResourcePriority), nullable=False, default=ResourcePriority.MEDIUM)
    is_published = Column(Boolean, nullable=False, default=True, index=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    def __repr__(self):
        return f"<EducationResource {self.id}: {self.title}>"

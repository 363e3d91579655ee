"""
Emergency contact model for BorderWatch.
"""

import enum
from sqlalchemy import Column, String, Integer, Boolean, Enum

from borderwatch.core.database import Base


class ContactType(str, enum.Enum):
    EMERGENCY = "emergency"
    ARMY = "army"
    POLICE = "police"
    MEDICAL = "medical"
    LOCAL = "local"


class EmergencyContact(Base):
    __tablename__ = "emergency_contacts"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    type = Column(Enum(ContactType), nullable=False)
    phone_number = Column(String(50), nullable=False)
    location = Column(String(255), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True, index=True)
    priority = Column(Integer, nullable=False, default=1)  # 1 is called first

    def __repr__(self):
        return f"<EmergencyContact {self.id}: {self.name}>"

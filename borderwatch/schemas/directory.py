"""
Schemas for the reference directories: safe zones, education resources
and emergency contacts.
"""

from datetime import datetime
from typing import List, Optional
from pydantic import Field

from borderwatch.models.contact import ContactType
from borderwatch.models.education import ResourcePriority, ResourceType
from borderwatch.models.safe_zone import SafeZoneType
from borderwatch.schemas.common import APIModel, GeoLocation


class SafeZoneCreate(APIModel):
    name: str = Field(..., min_length=1, max_length=255)
    type: SafeZoneType
    location: GeoLocation
    capacity: Optional[int] = Field(None, ge=0)
    facilities: List[str] = []
    contact: Optional[str] = None


class SafeZoneOut(APIModel):
    id: int
    name: str
    type: SafeZoneType
    location: GeoLocation
    capacity: Optional[int] = None
    facilities: List[str] = []
    contact: Optional[str] = None
    is_active: bool
    created_at: datetime
    # Set only when the caller searched around a location
    distance_km: Optional[float] = None


class EducationResourceCreate(APIModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: str
    type: ResourceType
    category: str = Field(..., min_length=1, max_length=50)
    content: Optional[str] = None
    duration: Optional[int] = Field(None, ge=0)
    priority: ResourcePriority = ResourcePriority.MEDIUM


class EducationResourceOut(APIModel):
    id: int
    title: str
    description: str
    type: ResourceType
    category: str
    content: Optional[str] = None
    duration: Optional[int] = None
    priority: ResourcePriority
    is_published: bool
    created_at: datetime


class EmergencyContactCreate(APIModel):
    name: str = Field(..., min_length=1, max_length=255)
    type: ContactType
    phone_number: str = Field(..., min_length=1, max_length=50)
    location: Optional[str] = None
    priority: int = Field(1, ge=1)


class EmergencyContactOut(APIModel):
    id: int
    name: str
    type: ContactType
    phone_number: str
    location: Optional[str] = None
    is_active: bool
    priority: int

"""
Emergency contact API endpoints for BorderWatch.
"""

from typing import List
from fastapi import APIRouter, Depends

from borderwatch.api.deps import get_storage
from borderwatch.schemas.directory import EmergencyContactCreate, EmergencyContactOut
from borderwatch.services.storage import Storage

router = APIRouter()


@router.get("", response_model=List[EmergencyContactOut])
async def list_contacts(storage: Storage = Depends(get_storage)):
    """Active emergency contacts in calling order."""
    return storage.get_emergency_contacts()


@router.post("", response_model=EmergencyContactOut)
async def create_contact(payload: EmergencyContactCreate, storage: Storage = Depends(get_storage)):
    return storage.create_emergency_contact(**payload.model_dump())

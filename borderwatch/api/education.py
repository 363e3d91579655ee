"""
Safety education API endpoints for BorderWatch.
"""

from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Path, Query

from borderwatch.api.deps import get_storage
from borderwatch.schemas.directory import EducationResourceCreate, EducationResourceOut
from borderwatch.services.storage import Storage

router = APIRouter()


@router.get("", response_model=List[EducationResourceOut])
async def list_resources(
    category: Optional[str] = Query(None, description="Only resources in this category"),
    storage: Storage = Depends(get_storage),
):
    """
    List published education resources, essential ones first.
    """
    return storage.get_education_resources(category)


@router.get("/{resource_id}", response_model=EducationResourceOut)
async def get_resource(resource_id: int = Path(...), storage: Storage = Depends(get_storage)):
    resource = storage.get_education_resource(resource_id)
    if not resource:
        raise HTTPException(status_code=404, detail="Education resource not found")

    return resource


@router.post("", response_model=EducationResourceOut)
async def create_resource(payload: EducationResourceCreate, storage: Storage = Depends(get_storage)):
    return storage.create_education_resource(**payload.model_dump())

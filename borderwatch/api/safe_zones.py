"""
Safe zone API endpoints for BorderWatch.
"""

from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query

from borderwatch.api.deps import get_storage
from borderwatch.core.config import settings
from borderwatch.schemas.directory import SafeZoneCreate, SafeZoneOut
from borderwatch.services.storage import Storage
from borderwatch.utils.geo import Coordinate

router = APIRouter()


@router.get("", response_model=List[SafeZoneOut])
async def list_safe_zones(
    lat: Optional[float] = Query(None, ge=-90, le=90),
    lng: Optional[float] = Query(None, ge=-180, le=180),
    radius: Optional[float] = Query(None, gt=0, description="Search radius in kilometers"),
    storage: Storage = Depends(get_storage),
):
    """
    List active safe zones.

    With lat and lng, only zones within radius (default
    DEFAULT_SAFE_ZONE_RADIUS_KM) are returned, nearest first, each with
    its distance.
    """
    if (lat is None) != (lng is None):
        raise HTTPException(status_code=422, detail="lat and lng must be provided together")

    if lat is None:
        zones = storage.get_safe_zones()
    else:
        zones = storage.get_safe_zones(
            Coordinate(lat, lng),
            radius if radius is not None else settings.DEFAULT_SAFE_ZONE_RADIUS_KM,
        )

    results = []
    for zone, distance in zones:
        out = SafeZoneOut.model_validate(zone)
        if distance is not None:
            out.distance_km = round(distance, 2)
        results.append(out)
    return results


@router.post("", response_model=SafeZoneOut)
async def create_safe_zone(payload: SafeZoneCreate, storage: Storage = Depends(get_storage)):
    return storage.create_safe_zone(**payload.model_dump())

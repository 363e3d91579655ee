"""
Location tracking API for BorderWatch.

Clients report their position periodically; the latest fix per session is
kept in memory and pushed to every connected dashboard.
"""

from datetime import datetime
from typing import List
from fastapi import APIRouter, Depends, Header, HTTPException, Path

from borderwatch.api.deps import get_hub, get_location_cache
from borderwatch.core.logging import logger
from borderwatch.schemas.events import LocationUpdateEvent
from borderwatch.schemas.location import LocationAck, LocationSample, LocationUpdate
from borderwatch.services.broadcast_hub import BroadcastHub
from borderwatch.services.location_cache import LocationCache

ANONYMOUS_SESSION = "anonymous"

router = APIRouter()


@router.post("/update", response_model=LocationAck)
async def update_location(
    payload: LocationUpdate,
    x_session_id: str = Header(ANONYMOUS_SESSION),
    cache: LocationCache = Depends(get_location_cache),
    hub: BroadcastHub = Depends(get_hub),
):
    """
    Record the caller's latest position and broadcast it.

    Args:
        payload: Position fix.
        x_session_id: Session key from the x-session-id header.

    Returns:
        Acknowledgement with the server receive time.
    """
    now = datetime.utcnow()
    sample = LocationSample(
        session_id=x_session_id or ANONYMOUS_SESSION,
        latitude=payload.latitude,
        longitude=payload.longitude,
        accuracy=payload.accuracy,
        timestamp=payload.timestamp or now,
    )
    cache.update(sample.session_id, sample)
    logger.debug(f"Location update from {sample.session_id}: {sample.latitude}, {sample.longitude}")

    await hub.broadcast(LocationUpdateEvent(data=sample))

    return LocationAck(success=True, timestamp=now)


@router.get("/all", response_model=List[LocationSample])
async def all_locations(cache: LocationCache = Depends(get_location_cache)):
    """Latest position of every session seen since startup."""
    return cache.all()


@router.get("/{session_id}", response_model=LocationSample)
async def get_location(
    session_id: str = Path(..., description="Session to look up"),
    cache: LocationCache = Depends(get_location_cache),
):
    sample = cache.get(session_id)
    if sample is None:
        raise HTTPException(status_code=404, detail="No location for session")
    return sample

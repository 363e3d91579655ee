"""
Shared API dependencies for BorderWatch.
"""

from typing import Optional
from fastapi import Depends, HTTPException, Request, status
from fastapi.security import APIKeyHeader
from sqlalchemy.orm import Session

from borderwatch.core.config import settings
from borderwatch.core.database import get_db
from borderwatch.services.ai_processor import AIProcessor
from borderwatch.services.alert_feed import AlertFeedCollector
from borderwatch.services.broadcast_hub import BroadcastHub
from borderwatch.services.location_cache import LocationCache
from borderwatch.services.storage import Storage

# API key security
API_KEY_NAME = "X-API-Key"
api_key_header = APIKeyHeader(name=API_KEY_NAME, auto_error=False)


def get_storage(db: Session = Depends(get_db)) -> Storage:
    return Storage(db)


def get_hub(request: Request) -> BroadcastHub:
    return request.app.state.hub


def get_location_cache(request: Request) -> LocationCache:
    return request.app.state.location_cache


def get_alert_feed(request: Request) -> AlertFeedCollector:
    return request.app.state.alert_feed


def get_ai_processor(request: Request) -> AIProcessor:
    return request.app.state.ai_processor


async def require_admin_key(api_key: Optional[str] = Depends(api_key_header)) -> Optional[str]:
    """
    Validate the admin API key.

    Admin endpoints are open when ADMIN_API_KEY is not configured.

    Raises:
        HTTPException: If a key is configured and the header does not match.
    """
    if settings.ADMIN_API_KEY is None or api_key == settings.ADMIN_API_KEY:
        return api_key
    raise HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Invalid API Key",
    )

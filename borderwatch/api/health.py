"""
Health API endpoints for BorderWatch.

This module provides endpoints for system health monitoring.
"""

import os
import platform
import psutil
from datetime import datetime
from typing import Dict, Any
import aiohttp
from fastapi import APIRouter, Depends
from sqlalchemy import text

from borderwatch.api.deps import get_hub, get_location_cache
from borderwatch.core.config import settings
from borderwatch.core.database import engine
from borderwatch.core.logging import logger
from borderwatch.services.broadcast_hub import BroadcastHub
from borderwatch.services.location_cache import LocationCache

router = APIRouter()


async def check_ollama_health() -> Dict[str, Any]:
    """
    Check if Ollama is running and responding.

    Returns:
        Dict[str, Any]: Status information about Ollama.
    """
    if not settings.AI_ENABLED:
        return {"status": "disabled"}

    try:
        async with aiohttp.ClientSession(timeout=aiohttp.ClientTimeout(total=5)) as session:
            async with session.get(f"{settings.OLLAMA_BASE_URL}/api/version") as response:
                if response.status == 200:
                    data = await response.json()
                    return {
                        "status": "operational",
                        "version": data.get("version", "unknown"),
                        "model": settings.AI_MODEL
                    }
                return {
                    "status": "degraded",
                    "error": f"Ollama responded with status code {response.status}"
                }
    except Exception as e:
        logger.error(f"Ollama health check failed: {e}")
        return {
            "status": "unavailable",
            "error": str(e)
        }


async def check_database_health() -> Dict[str, Any]:
    """
    Check if the database is accessible.

    Returns:
        Dict[str, Any]: Status information about the database.
    """
    try:
        with engine.connect() as connection:
            connection.execute(text("SELECT 1"))

        db_path = settings.DATABASE_URL.replace("sqlite:///", "")
        db_size = os.path.getsize(db_path) if os.path.exists(db_path) else 0

        return {
            "status": "operational",
            "size_mb": round(db_size / (1024 * 1024), 2)
        }
    except Exception as e:
        logger.error(f"Database health check failed: {e}")
        return {
            "status": "unavailable",
            "error": str(e)
        }


async def get_system_stats() -> Dict[str, Any]:
    """
    Get system resource statistics.

    Returns:
        Dict[str, Any]: System resource statistics.
    """
    try:
        memory = psutil.virtual_memory()
        disk = psutil.disk_usage('/')

        return {
            "cpu_percent": psutil.cpu_percent(interval=None),
            "memory_percent": memory.percent,
            "memory_used_gb": round(memory.used / (1024 ** 3), 2),
            "disk_percent": disk.percent,
            "platform": platform.platform(),
            "python_version": platform.python_version()
        }
    except Exception as e:
        logger.error(f"Failed to get system stats: {e}")
        return {
            "error": str(e)
        }


@router.get("")
async def health_check(
    hub: BroadcastHub = Depends(get_hub),
    cache: LocationCache = Depends(get_location_cache),
):
    """
    System health check endpoint.

    Returns:
        Dict: Health status of various system components.
    """
    return {
        "status": "operational",
        "version": settings.VERSION,
        "timestamp": datetime.utcnow().isoformat(),
        "websocket_connections": hub.connection_count,
        "tracked_sessions": len(cache),
        "ollama_status": await check_ollama_health(),
        "database_status": await check_database_health(),
        "system": await get_system_stats()
    }

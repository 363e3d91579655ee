"""
Serves report media saved under UPLOAD_DIR.
"""

import os
from fastapi import APIRouter, HTTPException
from fastapi.responses import FileResponse

from borderwatch.core.config import settings

router = APIRouter()


@router.get("/{filename}")
async def get_upload(filename: str):
    # Stay inside the upload directory
    path = os.path.join(settings.UPLOAD_DIR, os.path.basename(filename))
    if not os.path.isfile(path):
        raise HTTPException(status_code=404, detail="File not found")

    return FileResponse(path)

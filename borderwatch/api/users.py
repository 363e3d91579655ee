"""
User API endpoints for BorderWatch.
"""

from fastapi import APIRouter, Depends, HTTPException, Path

from borderwatch.api.deps import get_storage
from borderwatch.schemas.chat import UserCreate, UserOut
from borderwatch.services.storage import Storage

router = APIRouter()


@router.post("", response_model=UserOut)
async def create_user(payload: UserCreate, storage: Storage = Depends(get_storage)):
    """
    Register a user account.

    Raises:
        HTTPException: 409 if the username is taken.
    """
    if storage.get_user_by_username(payload.username):
        raise HTTPException(status_code=409, detail="Username already exists")

    return storage.create_user(**payload.model_dump())


@router.get("/{user_id}", response_model=UserOut)
async def get_user(user_id: int = Path(...), storage: Storage = Depends(get_storage)):
    user = storage.get_user(user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")

    return user

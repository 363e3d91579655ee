"""
User and chat schemas for BorderWatch.
"""

from datetime import datetime
from typing import Any, Dict, Optional
from pydantic import AliasChoices, Field

from borderwatch.models.chat import MessageType
from borderwatch.models.user import UserRole
from borderwatch.schemas.common import APIModel


class UserCreate(APIModel):
    username: str = Field(..., min_length=3, max_length=100)
    password: str = Field(..., min_length=8)
    full_name: str = Field(..., min_length=1, max_length=255)
    phone_number: Optional[str] = None
    location: Optional[str] = None


class UserOut(APIModel):
    id: int
    username: str
    full_name: str
    phone_number: Optional[str] = None
    location: Optional[str] = None
    role: UserRole
    is_verified: bool
    created_at: datetime


class ChatMessageCreate(APIModel):
    sender_id: int
    receiver_id: Optional[int] = None
    message: str = Field(..., min_length=1)
    message_type: MessageType = MessageType.TEXT
    meta: Optional[Dict[str, Any]] = Field(
        None,
        validation_alias=AliasChoices("metadata_", "metadata"),
        serialization_alias="metadata",
    )


class ChatMessageOut(APIModel):
    id: int
    sender_id: int
    receiver_id: Optional[int] = None
    message: str
    message_type: MessageType
    is_read: bool
    meta: Optional[Dict[str, Any]] = Field(
        None,
        validation_alias=AliasChoices("metadata_", "metadata"),
        serialization_alias="metadata",
    )
    created_at: datetime

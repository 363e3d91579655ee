"""
Chat API endpoints for BorderWatch.

Messages between civilians and the admin control room.
"""

from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Path, Query

from borderwatch.api.deps import get_storage
from borderwatch.schemas.chat import ChatMessageCreate, ChatMessageOut
from borderwatch.services.storage import Storage

router = APIRouter()


@router.get("/messages", response_model=List[ChatMessageOut])
async def list_messages(
    user_id: Optional[int] = Query(None, alias="userId"),
    receiver_id: Optional[int] = Query(None, alias="receiverId"),
    storage: Storage = Depends(get_storage),
):
    """
    List chat messages, newest first.

    Args:
        user_id: Only messages this user sent or received.
        receiver_id: With user_id, only the conversation between the two.
    """
    return storage.get_chat_messages(user_id, receiver_id)


@router.post("/messages", response_model=ChatMessageOut)
async def send_message(payload: ChatMessageCreate, storage: Storage = Depends(get_storage)):
    """
    Send a chat message.

    Raises:
        HTTPException: If the sender or receiver does not exist.
    """
    if not storage.get_user(payload.sender_id):
        raise HTTPException(status_code=404, detail="Sender not found")
    if payload.receiver_id is not None and not storage.get_user(payload.receiver_id):
        raise HTTPException(status_code=404, detail="Receiver not found")

    fields = payload.model_dump(exclude={"meta"})
    return storage.create_chat_message(**fields, metadata_=payload.meta)


@router.post("/messages/{message_id}/read", response_model=ChatMessageOut)
async def mark_read(message_id: int = Path(...), storage: Storage = Depends(get_storage)):
    message = storage.mark_message_as_read(message_id)
    if not message:
        raise HTTPException(status_code=404, detail="Message not found")

    return message

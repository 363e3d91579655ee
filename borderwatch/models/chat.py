"""
Chat message model for BorderWatch.

Messages between civilians and the admin control room. A message without a
receiver is addressed to the control room as a whole.
"""

import enum
from datetime import datetime
from sqlalchemy import Column, Text, Integer, Boolean, DateTime, Enum, JSON, ForeignKey

from borderwatch.core.database import Base


class MessageType(str, enum.Enum):
    TEXT = "text"
    EMERGENCY = "emergency"
    ALERT = "alert"
    FILE = "file"


class ChatMessage(Base):
    __tablename__ = "chat_messages"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    sender_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    receiver_id = Column(Integer, ForeignKey("users.id"), nullable=True, index=True)
    message = Column(Text, nullable=False)
    message_type = Column(Enum(MessageType), nullable=False, default=MessageType.TEXT)
    is_read = Column(Boolean, nullable=False, default=False)
    metadata_ = Column("metadata", JSON, nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    def __repr__(self):
        return f"<ChatMessage {self.id} from {self.sender_id}>"

import uuid
from datetime import datetime
from typing import Any, Dict

from pydantic import BaseModel, Field

from socialnet.core.pagination import CursorPagination


class MessageOut(BaseModel):
    id: uuid.UUID
    sender_id: uuid.UUID
    receiver_id: uuid.UUID
    content: str
    created_at: datetime

    class Config:
        from_attributes = True


class MessageCreate(BaseModel):
    sender_id: uuid.UUID
    receiver_id: uuid.UUID
    content: str = Field(min_length=1)


class MessageLookup(BaseModel):
    user_id: uuid.UUID
    message_id: uuid.UUID


class ChatLookup(BaseModel):
    user_id: uuid.UUID
    other_id: uuid.UUID


# Realtime frames: {"event": ..., "data": {...}}
class SocketFrame(BaseModel):
    event: str = Field(min_length=1)
    data: Dict[str, Any] = Field(default_factory=dict)


class MessageIn(BaseModel):
    # kept as text so unknown or malformed ids surface as "user not found"
    receiver_id: str = Field(min_length=1)
    content: str = Field(min_length=1)


class ChatQuery(ChatLookup, CursorPagination):
    pass

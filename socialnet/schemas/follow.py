import uuid
from datetime import datetime

from pydantic import BaseModel


class FollowOut(BaseModel):
    id: uuid.UUID
    follower_id: uuid.UUID
    followed_id: uuid.UUID
    created_at: datetime

    class Config:
        from_attributes = True


class FollowPair(BaseModel):
    follower_id: uuid.UUID
    followed_id: uuid.UUID

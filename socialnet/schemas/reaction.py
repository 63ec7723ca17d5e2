import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from socialnet.db.models.reaction import ReactionAction


class ReactionIn(BaseModel):
    action: ReactionAction


class ReactionOut(BaseModel):
    id: uuid.UUID
    author_id: uuid.UUID
    post_id: uuid.UUID
    action: ReactionAction
    created_at: datetime

    class Config:
        from_attributes = True


class ReactionInput(BaseModel):
    user_id: uuid.UUID
    post_id: uuid.UUID
    action: ReactionAction


class ReactionLookup(BaseModel):
    reaction_id: uuid.UUID


class ReactionsByAuthor(BaseModel):
    user_id: uuid.UUID
    author_id: uuid.UUID
    action: Optional[ReactionAction] = None

import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from socialnet.core.pagination import CursorPagination
from socialnet.schemas.image import ImageName
from socialnet.schemas.user import UserOut


class PostCreate(BaseModel):
    content: str = Field(min_length=1, max_length=240)
    images: List[ImageName] = Field(default_factory=list, max_length=4)


class PostOut(BaseModel):
    id: uuid.UUID
    author_id: uuid.UUID
    parent_post_id: Optional[uuid.UUID] = None
    content: str
    images: List[str] = []
    created_at: datetime

    class Config:
        from_attributes = True


class ExtendedPostOut(BaseModel):
    post: PostOut
    author: UserOut
    qty_comments: int = 0
    qty_likes: int = 0
    qty_retweets: int = 0


class PostLookup(BaseModel):
    user_id: uuid.UUID
    post_id: uuid.UUID


class AuthorLookup(BaseModel):
    user_id: uuid.UUID
    author_id: uuid.UUID


class FeedQuery(CursorPagination):
    user_id: uuid.UUID


class AuthorPostsQuery(AuthorLookup, CursorPagination):
    pass


class PostCommentsQuery(PostLookup, CursorPagination):
    pass

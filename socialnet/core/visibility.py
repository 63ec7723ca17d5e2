import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from socialnet.db.models.follow import Follow
from socialnet.db.models.user import User, Visibility


def as_uuid(value):
    """Coerce ``value`` to a UUID, or None when it is not one."""
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except (TypeError, ValueError):
        return None


class VisibilityResolver:
    """Read-only answers to "may this viewer read that user's content"."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def user_exists(self, user_id) -> bool:
        user_id = as_uuid(user_id)
        if user_id is None:
            return False
        found = await self.db.execute(select(User.id).where(User.id == user_id))
        return found.scalar_one_or_none() is not None

    async def is_following(self, follower_id, followed_id) -> bool:
        follower_id, followed_id = as_uuid(follower_id), as_uuid(followed_id)
        if follower_id is None or followed_id is None:
            return False
        edge = await self.db.execute(
            select(Follow.id).where(Follow.follower_id == follower_id, Follow.followed_id == followed_id)
        )
        return edge.scalar_one_or_none() is not None

    async def can_view(self, viewer_id, target_author_id) -> bool:
        # self access is not implied here, see can_view_or_is_self
        author_id = as_uuid(target_author_id)
        if author_id is None:
            return False
        visibility = (
            await self.db.execute(select(User.visibility).where(User.id == author_id))
        ).scalar_one_or_none()
        if visibility is None:
            return False
        if visibility == Visibility.PUBLIC:
            return True
        if visibility == Visibility.HIDDEN:
            return False
        return await self.is_following(viewer_id, author_id)

    async def can_view_or_is_self(self, viewer_id, target_author_id) -> bool:
        viewer = as_uuid(viewer_id)
        if viewer is not None and viewer == as_uuid(target_author_id):
            return True
        return await self.can_view(viewer_id, target_author_id)

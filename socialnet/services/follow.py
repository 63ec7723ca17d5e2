from typing import List

from sqlalchemy import select

from socialnet.core.errors import ConflictError, NotFoundError
from socialnet.core.validation import validate
from socialnet.db.models.follow import Follow
from socialnet.schemas.follow import FollowOut, FollowPair
from socialnet.services.base import BaseService


class FollowService(BaseService):
    async def _edge(self, pair: FollowPair):
        found = await self.db.execute(
            select(Follow).where(Follow.follower_id == pair.follower_id, Follow.followed_id == pair.followed_id)
        )
        return found.scalar_one_or_none()

    async def follow(self, follower_id, followed_id) -> FollowOut:
        pair = validate(FollowPair, follower_id=follower_id, followed_id=followed_id)
        if pair.follower_id == pair.followed_id:
            raise ConflictError("CANNOT_FOLLOW_ITSELF")
        if not await self.resolver.user_exists(pair.followed_id):
            raise NotFoundError("user")
        if await self._edge(pair) is not None:
            raise ConflictError("FOLLOW_ALREADY_EXISTS")

        new_follow = Follow(follower_id=pair.follower_id, followed_id=pair.followed_id)
        self.db.add(new_follow)
        await self.commit("creating follow", conflict_code="FOLLOW_ALREADY_EXISTS")
        await self.db.refresh(new_follow)
        return FollowOut.model_validate(new_follow)

    async def unfollow(self, follower_id, followed_id) -> None:
        pair = validate(FollowPair, follower_id=follower_id, followed_id=followed_id)
        edge = await self._edge(pair)
        if edge is None:
            raise NotFoundError("follow")
        await self.db.delete(edge)
        await self.commit("deleting follow")

    async def get_follow(self, follower_id, followed_id) -> FollowOut:
        pair = validate(FollowPair, follower_id=follower_id, followed_id=followed_id)
        edge = await self._edge(pair)
        if edge is None:
            raise NotFoundError("follow")
        return FollowOut.model_validate(edge)

    async def list_all(self) -> List[FollowOut]:
        follows = (await self.db.execute(select(Follow).order_by(Follow.created_at, Follow.id))).scalars().all()
        if not follows:
            raise NotFoundError("follows")
        return [FollowOut.model_validate(edge) for edge in follows]

from typing import List

from sqlalchemy import select

from socialnet.core.errors import ConflictError, InvalidUserError, NotFoundError
from socialnet.core.validation import validate
from socialnet.db.models.post import Post
from socialnet.db.models.reaction import Reaction, ReactionAction
from socialnet.schemas.post import PostLookup
from socialnet.schemas.reaction import ReactionInput, ReactionLookup, ReactionOut, ReactionsByAuthor
from socialnet.services.base import BaseService


class ReactionService(BaseService):
    async def _check_targets(self, data: ReactionInput):
        if await self.db.get(Post, data.post_id) is None:
            raise NotFoundError("post")
        if not await self.resolver.user_exists(data.user_id):
            raise NotFoundError("user")

    async def _find(self, data: ReactionInput):
        found = await self.db.execute(
            select(Reaction).where(
                Reaction.author_id == data.user_id,
                Reaction.post_id == data.post_id,
                Reaction.action == data.action,
            )
        )
        return found.scalar_one_or_none()

    async def create_reaction(self, user_id, post_id, action) -> ReactionOut:
        data = validate(ReactionInput, user_id=user_id, post_id=post_id, action=action)
        await self._check_targets(data)
        if await self._find(data) is not None:
            raise ConflictError("REACTION_ALREADY_EXISTS")

        reaction = Reaction(author_id=data.user_id, post_id=data.post_id, action=data.action)
        self.db.add(reaction)
        await self.commit("creating reaction", conflict_code="REACTION_ALREADY_EXISTS")
        await self.db.refresh(reaction)
        return ReactionOut.model_validate(reaction)

    async def delete_reaction(self, user_id, post_id, action) -> None:
        data = validate(ReactionInput, user_id=user_id, post_id=post_id, action=action)
        await self._check_targets(data)
        reaction = await self._find(data)
        if reaction is None:
            raise ConflictError("REACTION_DOES_NOT_EXIST")
        await self.db.delete(reaction)
        await self.commit("deleting reaction")

    async def get_reaction(self, reaction_id) -> ReactionOut:
        data = validate(ReactionLookup, reaction_id=reaction_id)
        reaction = await self.db.get(Reaction, data.reaction_id)
        if reaction is None:
            raise NotFoundError("reaction")
        return ReactionOut.model_validate(reaction)

    async def get_all_reactions(self) -> List[ReactionOut]:
        reactions = (await self.db.execute(select(Reaction).order_by(Reaction.created_at))).scalars().all()
        if not reactions:
            raise NotFoundError("reactions")
        return [ReactionOut.model_validate(reaction) for reaction in reactions]

    async def get_reactions_for_post(self, user_id, post_id) -> List[ReactionOut]:
        data = validate(PostLookup, user_id=user_id, post_id=post_id)
        post = await self.db.get(Post, data.post_id)
        if post is None:
            raise NotFoundError("post")
        if not await self.resolver.can_view_or_is_self(data.user_id, post.author_id):
            raise InvalidUserError()
        reactions = (
            await self.db.execute(
                select(Reaction).where(Reaction.post_id == data.post_id).order_by(Reaction.created_at)
            )
        ).scalars().all()
        if not reactions:
            raise NotFoundError("reactions")
        return [ReactionOut.model_validate(reaction) for reaction in reactions]

    async def get_reactions_by_author(self, user_id, author_id, action=None) -> List[ReactionOut]:
        data = validate(ReactionsByAuthor, user_id=user_id, author_id=author_id, action=action)
        if not await self.resolver.can_view_or_is_self(data.user_id, data.author_id):
            raise InvalidUserError()
        stmt = select(Reaction).where(Reaction.author_id == data.author_id)
        if data.action is not None:
            stmt = stmt.where(Reaction.action == data.action)
        reactions = (await self.db.execute(stmt.order_by(Reaction.created_at))).scalars().all()
        if not reactions:
            raise NotFoundError("reactions")
        return [ReactionOut.model_validate(reaction) for reaction in reactions]

    async def get_likes_by_author(self, user_id, author_id) -> List[ReactionOut]:
        return await self.get_reactions_by_author(user_id, author_id, ReactionAction.LIKE)

    async def get_retweets_by_author(self, user_id, author_id) -> List[ReactionOut]:
        return await self.get_reactions_by_author(user_id, author_id, ReactionAction.RETWEET)

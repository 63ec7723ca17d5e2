import uuid
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from socialnet.core.errors import ForbiddenError, InvalidUserError, NotFoundError
from socialnet.core.pagination import page_fields, paginate_cursor
from socialnet.core.validation import validate
from socialnet.core.visibility import VisibilityResolver
from socialnet.db.models.post import Post
from socialnet.schemas.post import AuthorLookup, ExtendedPostOut, PostCommentsQuery, PostCreate, PostLookup, PostOut
from socialnet.services.base import BaseService
from socialnet.services.post import PostAssembler, enriched_posts


class CommentCreate(PostCreate):
    post_id: uuid.UUID


class CommentService(BaseService):
    """Comments are posts with a parent; they share the post payloads."""

    def __init__(self, db: AsyncSession, signer, resolver: VisibilityResolver = None):
        super().__init__(db, resolver)
        self.assembler = PostAssembler(signer)

    async def create_comment(self, user_id, post_id, content: str, images: Optional[List[str]] = None) -> PostOut:
        data = validate(CommentCreate, post_id=post_id, content=content, images=images or [])
        if not await self.resolver.user_exists(user_id):
            raise NotFoundError("user")
        parent = await self.db.get(Post, data.post_id)
        if parent is None:
            raise NotFoundError("post")
        if not await self.resolver.can_view_or_is_self(user_id, parent.author_id):
            raise InvalidUserError()

        comment = Post(
            author_id=user_id,
            parent_post_id=parent.id,
            content=data.content,
            images=await self.assembler.issue_keys(data.images),
        )
        self.db.add(comment)
        await self.commit("creating comment")
        await self.db.refresh(comment)
        return PostOut.model_validate(comment)

    async def delete_comment(self, user_id, comment_id) -> None:
        data = validate(PostLookup, user_id=user_id, post_id=comment_id)
        comment = await self.db.get(Post, data.post_id)
        if comment is None or comment.parent_post_id is None:
            raise NotFoundError("comment")
        if comment.author_id != data.user_id:
            raise ForbiddenError()
        await self.db.delete(comment)
        await self.commit("deleting comment")

    async def get_comment(self, user_id, comment_id) -> ExtendedPostOut:
        data = validate(PostLookup, user_id=user_id, post_id=comment_id)
        comment = (await self.db.execute(enriched_posts().where(Post.id == data.post_id))).scalar_one_or_none()
        if comment is None or comment.parent_post_id is None:
            raise NotFoundError("comment")
        if not await self.resolver.can_view_or_is_self(data.user_id, comment.author_id):
            raise InvalidUserError()
        return await self.assembler.extend(comment)

    async def get_comments_by_author(self, user_id, author_id) -> List[ExtendedPostOut]:
        data = validate(AuthorLookup, user_id=user_id, author_id=author_id)
        if not await self.resolver.can_view_or_is_self(data.user_id, data.author_id):
            raise InvalidUserError()
        stmt = enriched_posts().where(Post.author_id == data.author_id, Post.parent_post_id.is_not(None))
        comments = await paginate_cursor(self.db, stmt, Post)
        if not comments:
            raise NotFoundError("comments")
        return await self.assembler.extend_all(comments)

    async def get_comments_for_post(self, user_id, post_id, options=None) -> List[ExtendedPostOut]:
        data = validate(PostCommentsQuery, user_id=user_id, post_id=post_id, **page_fields(options))
        post = await self.db.get(Post, data.post_id)
        if post is None:
            raise NotFoundError("post")
        if not await self.resolver.can_view_or_is_self(data.user_id, post.author_id):
            raise InvalidUserError()
        stmt = enriched_posts().where(Post.parent_post_id == data.post_id)
        comments = await paginate_cursor(self.db, stmt, Post, data)
        if not comments:
            raise NotFoundError("comments")
        return await self.assembler.extend_all(comments)

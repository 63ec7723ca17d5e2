from typing import List, Optional

from sqlalchemy import and_, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from socialnet.core.errors import ForbiddenError, InvalidUserError, NotFoundError
from socialnet.core.pagination import page_fields, paginate_cursor
from socialnet.core.validation import validate
from socialnet.core.visibility import VisibilityResolver
from socialnet.db.models.follow import Follow
from socialnet.db.models.post import Post
from socialnet.db.models.reaction import ReactionAction
from socialnet.db.models.user import User, Visibility
from socialnet.schemas.post import AuthorPostsQuery, ExtendedPostOut, FeedQuery, PostCreate, PostLookup, PostOut
from socialnet.schemas.user import UserOut
from socialnet.services.base import BaseService


def enriched_posts():
    """Posts with author, reactions and comments loaded alongside, for counting in memory."""
    return (
        select(Post)
        .options(
            selectinload(Post.author),
            selectinload(Post.reactions),
            selectinload(Post.comments),
        )
        .execution_options(populate_existing=True)
    )


class PostAssembler:
    """Turns stored posts into client payloads: signed urls and aggregate counts."""

    def __init__(self, signer):
        self.signer = signer

    async def sign_images(self, keys: List[str]) -> List[str]:
        # positional: the i-th url replaces the i-th key
        return [(await self.signer.sign(key)).url for key in keys]

    async def issue_keys(self, names: List[str]) -> List[str]:
        return [(await self.signer.sign_upload(name)).key for name in names]

    async def author(self, user) -> UserOut:
        author = UserOut.model_validate(user)
        if author.profile_picture:
            author.profile_picture = (await self.signer.sign(author.profile_picture)).url
        return author

    async def extend(self, post: Post) -> ExtendedPostOut:
        base = PostOut.model_validate(post)
        base.images = await self.sign_images(post.images or [])
        return ExtendedPostOut(
            post=base,
            author=await self.author(post.author),
            qty_comments=len(post.comments),
            qty_likes=sum(1 for reaction in post.reactions if reaction.action == ReactionAction.LIKE),
            qty_retweets=sum(1 for reaction in post.reactions if reaction.action == ReactionAction.RETWEET),
        )

    async def extend_all(self, posts: List[Post]) -> List[ExtendedPostOut]:
        return [await self.extend(post) for post in posts]


class PostService(BaseService):
    def __init__(self, db: AsyncSession, signer, resolver: VisibilityResolver = None):
        super().__init__(db, resolver)
        self.assembler = PostAssembler(signer)

    async def create_post(self, user_id, content: str, images: Optional[List[str]] = None) -> PostOut:
        data = validate(PostCreate, content=content, images=images or [])
        new_post = Post(
            author_id=user_id,
            content=data.content,
            images=await self.assembler.issue_keys(data.images),
        )
        self.db.add(new_post)
        await self.commit("creating post")
        await self.db.refresh(new_post)
        return PostOut.model_validate(new_post)

    async def delete_post(self, user_id, post_id) -> None:
        data = validate(PostLookup, user_id=user_id, post_id=post_id)
        post = await self.db.get(Post, data.post_id)
        if post is None:
            raise NotFoundError("post")
        # only the author can delete a post
        if post.author_id != data.user_id:
            raise ForbiddenError()
        await self.db.delete(post)
        await self.commit("deleting post")

    async def get_post(self, user_id, post_id) -> ExtendedPostOut:
        data = validate(PostLookup, user_id=user_id, post_id=post_id)
        post = (await self.db.execute(enriched_posts().where(Post.id == data.post_id))).scalar_one_or_none()
        if post is None:
            raise NotFoundError("post")
        if not await self.resolver.can_view_or_is_self(data.user_id, post.author_id):
            raise InvalidUserError()
        return await self.assembler.extend(post)

    async def get_latest_posts(self, user_id, options=None) -> List[ExtendedPostOut]:
        data = validate(FeedQuery, user_id=user_id, **page_fields(options))
        followed = select(Follow.followed_id).where(Follow.follower_id == data.user_id)
        stmt = (
            enriched_posts()
            .join(Post.author)
            .where(
                Post.parent_post_id.is_(None),
                or_(
                    User.visibility == Visibility.PUBLIC,
                    and_(User.visibility == Visibility.PRIVATE, User.id.in_(followed)),
                ),
            )
        )
        posts = await paginate_cursor(self.db, stmt, Post, data)
        if not posts:
            raise NotFoundError("posts")
        return await self.assembler.extend_all(posts)

    async def get_posts_by_author(self, user_id, author_id, options=None) -> List[ExtendedPostOut]:
        data = validate(AuthorPostsQuery, user_id=user_id, author_id=author_id, **page_fields(options))
        if not await self.resolver.can_view_or_is_self(data.user_id, data.author_id):
            raise InvalidUserError()
        stmt = enriched_posts().where(Post.author_id == data.author_id, Post.parent_post_id.is_(None))
        posts = await paginate_cursor(self.db, stmt, Post, data)
        if not posts:
            raise NotFoundError("posts")
        return await self.assembler.extend_all(posts)

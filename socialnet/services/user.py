from typing import List, Optional

from sqlalchemy import or_, select

from socialnet.core.errors import InvalidUserError, NotFoundError
from socialnet.core.pagination import page_fields, paginate_offset
from socialnet.core.security import hash_password
from socialnet.core.validation import validate
from socialnet.core.visibility import VisibilityResolver
from socialnet.db.models.follow import Follow
from socialnet.db.models.user import User, Visibility
from socialnet.schemas.user import (
    RecommendationsQuery,
    UserLookup,
    UserMeOut,
    UserOut,
    UserPairLookup,
    UserProfileOut,
    UserUpdate,
    UserUpdateOut,
)
from socialnet.services.base import BaseService


class UserService(BaseService):
    def __init__(self, db, signer, resolver: VisibilityResolver = None):
        super().__init__(db, resolver)
        self.signer = signer

    async def _signed(self, user: User) -> UserOut:
        out = UserOut.model_validate(user)
        if out.profile_picture:
            out.profile_picture = (await self.signer.sign(out.profile_picture)).url
        return out

    async def _load(self, user_id) -> User:
        user = await self.db.get(User, user_id)
        if user is None:
            raise NotFoundError("user")
        return user

    async def get_me(self, user_id) -> UserMeOut:
        data = validate(UserLookup, user_id=user_id)
        user = await self._load(data.user_id)
        signed = await self._signed(user)
        return UserMeOut(user=signed, url=signed.profile_picture or "")

    async def get_user_profile(self, viewer_id, user_id) -> UserProfileOut:
        data = validate(UserPairLookup, user_id=viewer_id, other_id=user_id)
        user = await self._load(data.other_id)
        if not await self.resolver.can_view_or_is_self(data.user_id, data.other_id):
            raise InvalidUserError()
        return UserProfileOut(
            user=await self._signed(user),
            is_public=user.visibility == Visibility.PUBLIC,
            is_following=await self.resolver.is_following(data.user_id, data.other_id),
        )

    async def get_user_recommendations(self, user_id, options=None) -> List[UserOut]:
        data = validate(RecommendationsQuery, user_id=user_id, **page_fields(options))
        followed = select(Follow.followed_id).where(Follow.follower_id == data.user_id)
        stmt = (
            select(User)
            .where(User.id != data.user_id, or_(User.id.in_(followed), User.visibility == Visibility.PUBLIC))
            .order_by(User.id.asc())
        )
        users = await paginate_offset(self.db, stmt, data)
        if not users:
            raise NotFoundError("users")
        return [await self._signed(user) for user in users]

    async def search_by_username(self, fragment: str) -> List[UserOut]:
        stmt = (
            select(User)
            .where(User.username.contains(fragment), User.visibility != Visibility.HIDDEN)
            .order_by(User.username)
        )
        users = (await self.db.execute(stmt)).scalars().all()
        if not users:
            raise NotFoundError("users")
        return [await self._signed(user) for user in users]

    async def update_user(
        self,
        user_id,
        name: Optional[str] = None,
        password: Optional[str] = None,
        visibility: Optional[Visibility] = None,
        profile_picture: Optional[str] = None,
    ) -> UserUpdateOut:
        data = validate(UserUpdate, name=name, password=password, visibility=visibility, profile_picture=profile_picture)
        user = await self._load(user_id)

        url = ""
        if data.name is not None:
            user.name = data.name
        if data.visibility is not None:
            user.visibility = data.visibility
        if data.password is not None:
            user.password = hash_password(data.password)
        if data.profile_picture is not None:
            upload = await self.signer.sign_upload(data.profile_picture)
            user.profile_picture = upload.key
            url = upload.url

        await self.commit("updating user")
        await self.db.refresh(user)
        return UserUpdateOut(
            id=user.id,
            name=user.name,
            visibility=user.visibility,
            profile_picture=user.profile_picture,
            password_is_updated=data.password is not None,
            url=url,
        )

    async def delete_user(self, user_id) -> None:
        data = validate(UserLookup, user_id=user_id)
        user = await self._load(data.user_id)
        await self.db.delete(user)
        await self.commit("deleting user")

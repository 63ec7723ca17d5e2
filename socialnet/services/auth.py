from typing import Optional

from sqlalchemy import or_, select

from socialnet.core.errors import ConflictError, NotFoundError, UnauthorizedError
from socialnet.core.security import create_access_token, hash_password, verify_password
from socialnet.core.validation import validate
from socialnet.db.models.user import User
from socialnet.schemas.token import Token
from socialnet.schemas.user import UserBase, UserLogin
from socialnet.services.base import BaseService


def issue_token(user: User) -> Token:
    access_token = create_access_token(data={"sub": str(user.id)})
    return Token(access_token=access_token, token_type="bearer", user_id=user.id)


class AuthService(BaseService):
    async def signup(self, email: str, username: str, name: str, password: str) -> Token:
        data = validate(UserBase, email=email, username=username, name=name, password=password)
        existing = await self.db.execute(
            select(User.id).where(or_(User.email == data.email, User.username == data.username))
        )
        if existing.first() is not None:
            raise ConflictError("USER_ALREADY_EXISTS")

        new_user = User(
            name=data.name,
            username=data.username,
            email=data.email,
            password=hash_password(data.password),
        )
        self.db.add(new_user)
        await self.commit("registering user", conflict_code="USER_ALREADY_EXISTS")
        await self.db.refresh(new_user)
        return issue_token(new_user)

    async def login(self, password: str, email: Optional[str] = None, username: Optional[str] = None) -> Token:
        data = validate(UserLogin, email=email, username=username, password=password)
        stmt = select(User).where(User.email == data.email if data.email else User.username == data.username)
        user = (await self.db.execute(stmt)).scalar_one_or_none()
        if user is None:
            raise NotFoundError("user")
        if not verify_password(data.password, user.password):
            raise UnauthorizedError("INCORRECT_PASSWORD")
        return issue_token(user)

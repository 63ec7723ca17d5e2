import uuid
from datetime import datetime, timedelta
from typing import Optional

from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy.ext.asyncio import AsyncSession

from socialnet.core import config
from socialnet.core.errors import NotFoundError, UnauthorizedError
from socialnet.db.models.user import User
from socialnet.db.session import get_db

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="api/auth/login", auto_error=False)


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    to_encode = data.copy()
    expire = datetime.utcnow() + (expires_delta or timedelta(days=config.ACCESS_TOKEN_EXPIRE_DAYS))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, config.SECRET_KEY, algorithm=config.ALGORITHM)


def verify_access_token(token: Optional[str]) -> uuid.UUID:
    """Return the user id carried by ``token``; signature and expiry are checked."""
    if not token:
        raise UnauthorizedError("MISSING_TOKEN")
    if token.lower().startswith("bearer "):
        token = token[len("bearer "):]
    try:
        payload = jwt.decode(token, config.SECRET_KEY, algorithms=[config.ALGORITHM])
        return uuid.UUID(payload.get("sub"))
    except (JWTError, TypeError, ValueError):
        raise UnauthorizedError("INVALID_TOKEN")


async def get_current_user(
    token: Optional[str] = Depends(oauth2_scheme),
    db: AsyncSession = Depends(get_db),
) -> User:
    user_id = verify_access_token(token)
    user = await db.get(User, user_id)
    if user is None:
        raise NotFoundError("user")
    return user

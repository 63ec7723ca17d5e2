import re
import uuid
from typing import Optional

from pydantic import BaseModel, EmailStr, Field, field_validator, model_validator

from socialnet.core.pagination import OffsetPagination
from socialnet.db.models.user import Visibility
from socialnet.schemas.image import ImageName


def check_strong_password(password: str) -> str:
    if (
        len(password) < 8
        or not re.search(r"[a-z]", password)
        or not re.search(r"[A-Z]", password)
        or not re.search(r"\d", password)
        or not re.search(r"[^A-Za-z0-9]", password)
    ):
        raise ValueError("password must have 8+ characters with lower, upper, digit and symbol")
    return password


class UserBase(BaseModel):
    email: EmailStr
    username: str = Field(min_length=1)
    name: str = Field(min_length=1)
    password: str

    @field_validator("password")
    @classmethod
    def strong_password(cls, value):
        return check_strong_password(value)


class UserLogin(BaseModel):
    email: Optional[EmailStr] = None
    username: Optional[str] = None
    password: str = Field(min_length=1)

    @model_validator(mode="after")
    def email_or_username(self):
        if not self.email and not self.username:
            raise ValueError("email or username is required")
        return self


class UserOut(BaseModel):
    id: uuid.UUID
    name: Optional[str] = None
    username: str
    visibility: Visibility
    profile_picture: Optional[str] = None

    class Config:
        from_attributes = True


class UserProfileOut(BaseModel):
    user: UserOut
    is_public: bool
    is_following: bool


class UserMeOut(BaseModel):
    user: UserOut
    url: str = ""


class UserUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    password: Optional[str] = None
    visibility: Optional[Visibility] = None
    profile_picture: Optional[ImageName] = None

    @field_validator("password")
    @classmethod
    def strong_password(cls, value):
        return value if value is None else check_strong_password(value)


class UserUpdateOut(BaseModel):
    id: uuid.UUID
    name: Optional[str] = None
    visibility: Visibility
    profile_picture: Optional[str] = None
    password_is_updated: bool = False
    url: str = ""


class UserLookup(BaseModel):
    user_id: uuid.UUID


class UserPairLookup(BaseModel):
    user_id: uuid.UUID
    other_id: uuid.UUID


class RecommendationsQuery(UserLookup, OffsetPagination):
    pass

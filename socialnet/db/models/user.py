import enum
import uuid
from datetime import datetime

from sqlalchemy import Column, DateTime, Enum, String, Uuid
from sqlalchemy.orm import relationship

from socialnet.db.base import Base


class Visibility(str, enum.Enum):
    PUBLIC = "PUBLIC"
    PRIVATE = "PRIVATE"
    HIDDEN = "HIDDEN"


class User(Base):
    __tablename__ = "users"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String, nullable=True)
    username = Column(String, unique=True, index=True, nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    password = Column(String, nullable=False)
    visibility = Column(Enum(Visibility, name="visibility"), default=Visibility.PUBLIC, nullable=False)
    profile_picture = Column(String, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    posts = relationship("Post", back_populates="author", cascade="all, delete-orphan", passive_deletes=True)
    reactions = relationship("Reaction", back_populates="author", cascade="all, delete-orphan", passive_deletes=True)
    following = relationship(
        "Follow", foreign_keys="Follow.follower_id", back_populates="follower",
        cascade="all, delete-orphan", passive_deletes=True,
    )
    followers = relationship(
        "Follow", foreign_keys="Follow.followed_id", back_populates="followed",
        cascade="all, delete-orphan", passive_deletes=True,
    )
    sent_messages = relationship(
        "Message", foreign_keys="Message.sender_id", cascade="all, delete-orphan", passive_deletes=True,
    )
    received_messages = relationship(
        "Message", foreign_keys="Message.receiver_id", cascade="all, delete-orphan", passive_deletes=True,
    )

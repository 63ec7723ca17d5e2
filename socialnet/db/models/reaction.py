import enum
import uuid
from datetime import datetime

from sqlalchemy import Column, DateTime, Enum, ForeignKey, UniqueConstraint, Uuid
from sqlalchemy.orm import relationship

from socialnet.db.base import Base


class ReactionAction(str, enum.Enum):
    LIKE = "LIKE"
    RETWEET = "RETWEET"


class Reaction(Base):
    __tablename__ = "reactions"
    __table_args__ = (UniqueConstraint("author_id", "post_id", "action", name="uq_reaction_triple"),)

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    author_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    post_id = Column(Uuid, ForeignKey("posts.id", ondelete="CASCADE"), nullable=False, index=True)
    action = Column(Enum(ReactionAction, name="reaction_action"), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)

    author = relationship("User", back_populates="reactions")
    post = relationship("Post", back_populates="reactions")

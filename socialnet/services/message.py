from typing import List

from sqlalchemy import and_, or_, select

from socialnet.core.errors import ForbiddenError, InvalidUserError, NotFoundError
from socialnet.core.pagination import page_fields, paginate_cursor
from socialnet.core.validation import validate
from socialnet.db.models.message import Message
from socialnet.schemas.message import ChatQuery, MessageCreate, MessageLookup, MessageOut
from socialnet.services.base import BaseService


class MessageService(BaseService):
    async def create(self, sender_id, receiver_id, content: str) -> MessageOut:
        data = validate(MessageCreate, sender_id=sender_id, receiver_id=receiver_id, content=content)
        message = Message(sender_id=data.sender_id, receiver_id=data.receiver_id, content=data.content)
        self.db.add(message)
        await self.commit("saving message")
        await self.db.refresh(message)
        return MessageOut.model_validate(message)

    async def delete(self, user_id, message_id) -> None:
        data = validate(MessageLookup, user_id=user_id, message_id=message_id)
        message = await self.db.get(Message, data.message_id)
        if message is None:
            raise NotFoundError("message")
        if message.sender_id != data.user_id:
            raise ForbiddenError()
        await self.db.delete(message)
        await self.commit("deleting message")

    async def get_message(self, user_id, message_id) -> MessageOut:
        data = validate(MessageLookup, user_id=user_id, message_id=message_id)
        message = await self.db.get(Message, data.message_id)
        if message is None or data.user_id not in (message.sender_id, message.receiver_id):
            raise NotFoundError("message")
        return MessageOut.model_validate(message)

    async def get_chat(self, user_id, other_id, options=None) -> List[MessageOut]:
        """Both directions of the conversation between two users, oldest first."""
        data = validate(ChatQuery, user_id=user_id, other_id=other_id, **page_fields(options))
        if not await self.resolver.is_following(data.user_id, data.other_id):
            raise InvalidUserError()
        stmt = select(Message).where(
            or_(
                and_(Message.sender_id == data.user_id, Message.receiver_id == data.other_id),
                and_(Message.sender_id == data.other_id, Message.receiver_id == data.user_id),
            )
        )
        messages = await paginate_cursor(self.db, stmt, Message, data, newest_first=False)
        if not messages:
            raise NotFoundError("messages")
        return [MessageOut.model_validate(message) for message in messages]

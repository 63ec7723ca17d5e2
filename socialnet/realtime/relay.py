import json
import logging
from datetime import datetime

from pydantic import ValidationError as PydanticValidationError

from socialnet.core.errors import AppError, ForbiddenError, NotFoundError, ValidationError
from socialnet.core.validation import violations_from
from socialnet.core.visibility import VisibilityResolver, as_uuid
from socialnet.realtime.gate import ClientSession, ConnectionManager
from socialnet.schemas.message import MessageIn, SocketFrame
from socialnet.services.message import MessageService


class MessageRelay:
    def __init__(self, manager: ConnectionManager, resolver: VisibilityResolver, messages: MessageService):
        self.manager = manager
        self.resolver = resolver
        self.messages = messages

    async def _fail(self, session: ClientSession, error: AppError):
        await session.send("error", error.to_dict())

    async def handle(self, session: ClientSession, raw):
        """Dispatch one inbound frame; ``raw`` is the decoded dict or the text received."""
        try:
            if isinstance(raw, (str, bytes)):
                raw = json.loads(raw)
            frame = SocketFrame.model_validate(raw)
        except PydanticValidationError as e:
            await self._fail(session, ValidationError(violations_from(e)))
            return
        except ValueError:
            await self._fail(
                session,
                ValidationError([{"field": "", "constraint": "json", "message": "Frame is not valid JSON"}]),
            )
            return

        if frame.event != "message":
            await self._fail(
                session,
                ValidationError(
                    [{"field": "event", "constraint": "unknown_event", "message": f"Unknown event {frame.event}"}]
                ),
            )
            return

        try:
            payload = MessageIn.model_validate(frame.data)
        except PydanticValidationError as e:
            await self._fail(session, ValidationError(violations_from(e)))
            return
        await self.relay(session, payload.receiver_id, payload.content)

    async def relay(self, session: ClientSession, receiver_id: str, content: str):
        try:
            if not await self.resolver.user_exists(receiver_id):
                raise NotFoundError("user")
            if not await self.resolver.is_following(session.user_id, receiver_id):
                raise ForbiddenError()

            receiver = str(as_uuid(receiver_id))
            # delivery first, the write follows
            await self.manager.emit(
                [receiver, session.user_id],
                "message",
                {
                    "sender_id": session.user_id,
                    "receiver_id": receiver,
                    "content": content,
                    "created_at": datetime.utcnow().isoformat(),
                },
            )
            await self.messages.create(session.user_id, receiver, content)
        except AppError as e:
            await self._fail(session, e)
        except Exception as e:
            logging.error(f"Failed to relay message from {session.user_id}: {str(e)}", exc_info=True)
            await session.send("error", {"message": "Internal server error", "code": 500})

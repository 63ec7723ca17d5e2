import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Response, WebSocket, WebSocketDisconnect, status
from sqlalchemy.ext.asyncio import AsyncSession

from socialnet.core.pagination import cursor_params
from socialnet.core.security import get_current_user
from socialnet.core.visibility import VisibilityResolver
from socialnet.db import session as db_session
from socialnet.db.models.user import User
from socialnet.realtime.gate import manager
from socialnet.realtime.relay import MessageRelay
from socialnet.schemas.message import MessageOut
from socialnet.services.message import MessageService

router = APIRouter()


def get_message_service(db: AsyncSession = Depends(db_session.get_db)) -> MessageService:
    return MessageService(db)


@router.websocket("/ws")
async def chat_socket(websocket: WebSocket, token: Optional[str] = None):
    token = token or websocket.headers.get("authorization")
    session = await manager.connect(websocket, token)
    if session is None:
        return

    try:
        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                break
            # text and binary frames both carry JSON
            raw = message.get("text")
            if raw is None:
                raw = message.get("bytes") or b""
            # one database session per frame
            async with db_session.SessionLocal() as db:
                resolver = VisibilityResolver(db)
                relay = MessageRelay(manager, resolver, MessageService(db, resolver))
                await relay.handle(session, raw)
    except WebSocketDisconnect:
        logging.info(f"Socket {session.id} of user {session.user_id} disconnected")
    finally:
        manager.disconnect(session)


# Conversation with another user, oldest first
@router.get("/chat/{user_id}", response_model=List[MessageOut])
async def chat_history(
    user_id: str,
    options: dict = Depends(cursor_params),
    current_user: User = Depends(get_current_user),
    service: MessageService = Depends(get_message_service),
):
    return await service.get_chat(current_user.id, user_id, options)


@router.get("/{message_id}", response_model=MessageOut)
async def get_message(
    message_id: str,
    current_user: User = Depends(get_current_user),
    service: MessageService = Depends(get_message_service),
):
    return await service.get_message(current_user.id, message_id)


@router.delete("/{message_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_message(
    message_id: str,
    current_user: User = Depends(get_current_user),
    service: MessageService = Depends(get_message_service),
):
    await service.delete(current_user.id, message_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

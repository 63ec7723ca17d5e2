import enum
import logging
import uuid
from collections import defaultdict
from typing import Iterable, Optional

from fastapi import WebSocket, WebSocketDisconnect, status

from socialnet.core.errors import UnauthorizedError
from socialnet.core.security import verify_access_token


class SessionState(str, enum.Enum):
    CONNECTING = "CONNECTING"
    AUTHENTICATING = "AUTHENTICATING"
    AUTHENTICATED = "AUTHENTICATED"
    CLOSED = "CLOSED"


class ClientSession:
    def __init__(self, websocket: WebSocket):
        self.websocket = websocket
        self.id = str(uuid.uuid4())
        self.user_id: Optional[str] = None
        self.state = SessionState.CONNECTING

    async def send(self, event: str, data: dict):
        await self.websocket.send_json({"event": event, "data": data})


class ConnectionManager:
    """Authenticates sockets and tracks room membership.

    Every session starts in a room named after its own id. Once the token is
    verified it moves to the room named after the user id, which every other
    session of the same user shares.
    """

    def __init__(self, verifier=verify_access_token):
        self.verifier = verifier
        self.rooms = defaultdict(set)  # {room: {session, ...}}
        self.sessions = {}  # {session_id: session}

    def join(self, session: ClientSession, room: str):
        self.rooms[room].add(session)

    def leave(self, session: ClientSession, room: str):
        members = self.rooms.get(room)
        if members is None:
            return
        members.discard(session)
        if not members:
            del self.rooms[room]

    async def connect(self, websocket: WebSocket, token: Optional[str]) -> Optional[ClientSession]:
        await websocket.accept()
        session = ClientSession(websocket)
        self.sessions[session.id] = session
        self.join(session, session.id)

        session.state = SessionState.AUTHENTICATING
        try:
            user_id = self.verifier(token)
        except UnauthorizedError as e:
            logging.info(f"Rejected socket {session.id}: {e.error_code}")
            await session.send("error", e.to_dict())
            await self.close(session, code=status.WS_1008_POLICY_VIOLATION)
            return None

        session.user_id = str(user_id)
        self.leave(session, session.id)
        self.join(session, session.user_id)
        session.state = SessionState.AUTHENTICATED
        logging.info(f"User {session.user_id} connected on socket {session.id}")

        await self.broadcast(
            "user connected",
            {"user_id": session.user_id, "session_id": session.id},
            exclude=session,
        )
        return session

    def disconnect(self, session: ClientSession):
        for room in [room for room, members in self.rooms.items() if session in members]:
            self.leave(session, room)
        self.sessions.pop(session.id, None)
        session.state = SessionState.CLOSED

    async def close(self, session: ClientSession, code: int = status.WS_1000_NORMAL_CLOSURE):
        self.disconnect(session)
        await session.websocket.close(code=code)

    async def _deliver(self, session: ClientSession, event: str, data: dict) -> bool:
        try:
            await session.send(event, data)
            return True
        except (WebSocketDisconnect, RuntimeError) as e:
            logging.warning(f"Dropping socket {session.id}: {e}")
            self.disconnect(session)
            return False

    async def emit(self, rooms: Iterable[str], event: str, data: dict) -> int:
        """Send one event to the union of ``rooms``; a session in several rooms gets it once."""
        targets = set()
        for room in rooms:
            targets |= self.rooms.get(room, set())
        delivered = 0
        for session in targets:
            delivered += await self._deliver(session, event, data)
        return delivered

    async def broadcast(self, event: str, data: dict, exclude: Optional[ClientSession] = None):
        for session in list(self.sessions.values()):
            if session is not exclude and session.state == SessionState.AUTHENTICATED:
                await self._deliver(session, event, data)


manager = ConnectionManager()

import os

os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"

import uuid
from datetime import datetime, timedelta

import pytest
from fastapi.testclient import TestClient

from socialnet.core.storage import SignedUrl, get_signer
from socialnet.db import session as db_session
from socialnet.db.base import Base
from socialnet.db.models.follow import Follow
from socialnet.db.models.post import Post
from socialnet.db.models.user import User, Visibility

T0 = datetime(2024, 1, 1, 12, 0, 0)


class FakeSigner:
    """Signs without touching cloudinary; remembers every key it issued."""

    def __init__(self):
        self.issued = []

    async def sign(self, key):
        return SignedUrl(url=f"https://cdn.test/{key}?signature=ok", key=key)

    async def sign_upload(self, name):
        key = f"post_images/{uuid.uuid4()}_{name}"
        self.issued.append(key)
        return SignedUrl(url=f"https://upload.test/{key}", key=key)


@pytest.fixture()
def signer():
    return FakeSigner()


@pytest.fixture()
async def db():
    engine = db_session.build_engine("sqlite+aiosqlite://")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    SessionLocal = db_session.build_sessionmaker(engine)
    async with SessionLocal() as session:
        yield session
    await engine.dispose()


@pytest.fixture()
def make_user(db):
    async def _make(username, visibility=Visibility.PUBLIC, **kwargs):
        user = User(
            username=username,
            email=f"{username}@example.com",
            name=username.title(),
            password="not-a-real-hash",
            visibility=visibility,
            **kwargs,
        )
        db.add(user)
        await db.commit()
        return user

    return _make


@pytest.fixture()
def make_follow(db):
    async def _make(follower, followed):
        edge = Follow(follower_id=follower.id, followed_id=followed.id)
        db.add(edge)
        await db.commit()
        return edge

    return _make


@pytest.fixture()
def make_post(db):
    async def _make(author, content="hello", minutes=0, parent=None, images=None, created_at=None):
        post = Post(
            author_id=author.id,
            content=content,
            images=images or [],
            parent_post_id=parent.id if parent is not None else None,
            created_at=created_at or T0 + timedelta(minutes=minutes),
        )
        db.add(post)
        await db.commit()
        return post

    return _make


@pytest.fixture()
def client(monkeypatch, signer):
    from main import app

    engine = db_session.build_engine("sqlite+aiosqlite://")
    monkeypatch.setattr(db_session, "engine", engine)
    monkeypatch.setattr(db_session, "SessionLocal", db_session.build_sessionmaker(engine))
    app.dependency_overrides[get_signer] = lambda: signer

    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture()
def websocket_factory():
    return FakeWebSocket


class FakeWebSocket:
    def __init__(self):
        self.sent = []
        self.accepted = False
        self.close_code = None

    async def accept(self):
        self.accepted = True

    async def send_json(self, data):
        if self.close_code is not None:
            raise RuntimeError("Cannot call send once a close message has been sent.")
        self.sent.append(data)

    async def close(self, code=1000):
        self.close_code = code

    def events(self, name):
        return [frame["data"] for frame in self.sent if frame["event"] == name]

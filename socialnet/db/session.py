import logging

import psycopg2
from psycopg2 import sql
from sqlalchemy import event
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from socialnet.core import config
from socialnet.db.base import Base
# model modules register their tables on Base.metadata
from socialnet.db.models import follow, message, post, reaction, user  # noqa: F401


def create_database_if_missing(url: str = config.DATABASE_URL):
    """Create the postgres database named in ``url`` when it does not exist yet."""
    db_url = make_url(url)
    if not db_url.get_backend_name().startswith("postgresql"):
        return
    try:
        conn = psycopg2.connect(
            dbname="postgres",
            user=db_url.username,
            password=db_url.password,
            host=db_url.host,
            port=db_url.port,
        )
        conn.autocommit = True
        cur = conn.cursor()
        cur.execute(sql.SQL("CREATE DATABASE {}").format(sql.Identifier(db_url.database)))
        cur.close()
        conn.close()
    except psycopg2.errors.DuplicateDatabase:
        pass
    except psycopg2.Error as e:
        logging.warning(f"Could not create database {db_url.database}: {e}")


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def build_engine(url: str):
    if url.startswith("sqlite"):
        # one shared connection so in-memory databases survive across sessions
        sqlite_engine = create_async_engine(
            url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
        event.listen(sqlite_engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
        return sqlite_engine
    return create_async_engine(url, pool_pre_ping=True)


def build_sessionmaker(bind):
    return async_sessionmaker(bind=bind, class_=AsyncSession, autoflush=False, expire_on_commit=False)


engine = build_engine(config.DATABASE_URL)
SessionLocal = build_sessionmaker(engine)


async def init_models():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def get_db():
    async with SessionLocal() as db:
        yield db

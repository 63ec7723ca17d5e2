import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from socialnet.api.v1 import auth, user
from socialnet.core import config
from socialnet.core.errors import AppError, app_error_handler, request_validation_handler, unhandled_error_handler
from socialnet.db import session
from socialnet.routers import chat, comment, follow, health, post, reaction

logging.basicConfig(level=config.LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")


@asynccontextmanager
async def lifespan(app: FastAPI):
    session.create_database_if_missing()
    await session.init_models()
    yield
    await session.engine.dispose()


app = FastAPI(lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_WHITELIST,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_exception_handler(AppError, app_error_handler)
app.add_exception_handler(RequestValidationError, request_validation_handler)
app.add_exception_handler(Exception, unhandled_error_handler)

app.include_router(auth.router, prefix="/api/auth", tags=["Auth"])
app.include_router(user.router, prefix="/api/users", tags=["Users"])
app.include_router(post.router, prefix="/api/posts", tags=["Posts"])
app.include_router(comment.router, prefix="/api/comments", tags=["Comments"])
app.include_router(reaction.router, prefix="/api/reactions", tags=["Reactions"])
app.include_router(follow.router, prefix="/api/follows", tags=["Follows"])
app.include_router(chat.router, prefix="/api/messages", tags=["Messages"])
app.include_router(health.router, prefix="/api/health", tags=["Health"])

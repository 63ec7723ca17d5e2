from typing import List

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from socialnet.core.pagination import cursor_params
from socialnet.core.security import get_current_user
from socialnet.core.storage import get_signer
from socialnet.db.models.user import User
from socialnet.db.session import get_db
from socialnet.schemas.post import ExtendedPostOut, PostCreate, PostOut
from socialnet.services.post import PostService

router = APIRouter()


def get_post_service(db: AsyncSession = Depends(get_db), signer=Depends(get_signer)) -> PostService:
    return PostService(db, signer)


@router.post("/", response_model=PostOut, status_code=status.HTTP_201_CREATED)
async def create_post(
    post: PostCreate,
    current_user: User = Depends(get_current_user),
    service: PostService = Depends(get_post_service),
):
    return await service.create_post(current_user.id, post.content, post.images)


# Latest posts the current user is allowed to see
@router.get("/feed", response_model=List[ExtendedPostOut])
async def feed(
    options: dict = Depends(cursor_params),
    current_user: User = Depends(get_current_user),
    service: PostService = Depends(get_post_service),
):
    return await service.get_latest_posts(current_user.id, options)


@router.get("/author/{author_id}", response_model=List[ExtendedPostOut])
async def posts_by_author(
    author_id: str,
    options: dict = Depends(cursor_params),
    current_user: User = Depends(get_current_user),
    service: PostService = Depends(get_post_service),
):
    return await service.get_posts_by_author(current_user.id, author_id, options)


@router.get("/{post_id}", response_model=ExtendedPostOut)
async def get_post(
    post_id: str,
    current_user: User = Depends(get_current_user),
    service: PostService = Depends(get_post_service),
):
    return await service.get_post(current_user.id, post_id)


@router.delete("/{post_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_post(
    post_id: str,
    current_user: User = Depends(get_current_user),
    service: PostService = Depends(get_post_service),
):
    await service.delete_post(current_user.id, post_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

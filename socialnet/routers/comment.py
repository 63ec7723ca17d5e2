from typing import List

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from socialnet.core.pagination import cursor_params
from socialnet.core.security import get_current_user
from socialnet.core.storage import get_signer
from socialnet.db.models.user import User
from socialnet.db.session import get_db
from socialnet.schemas.post import ExtendedPostOut, PostCreate, PostOut
from socialnet.services.comment import CommentService

router = APIRouter()


def get_comment_service(db: AsyncSession = Depends(get_db), signer=Depends(get_signer)) -> CommentService:
    return CommentService(db, signer)


@router.post("/post/{post_id}", response_model=PostOut, status_code=status.HTTP_201_CREATED)
async def create_comment(
    post_id: str,
    comment: PostCreate,
    current_user: User = Depends(get_current_user),
    service: CommentService = Depends(get_comment_service),
):
    return await service.create_comment(current_user.id, post_id, comment.content, comment.images)


@router.get("/post/{post_id}", response_model=List[ExtendedPostOut])
async def comments_for_post(
    post_id: str,
    options: dict = Depends(cursor_params),
    current_user: User = Depends(get_current_user),
    service: CommentService = Depends(get_comment_service),
):
    return await service.get_comments_for_post(current_user.id, post_id, options)


@router.get("/author/{author_id}", response_model=List[ExtendedPostOut])
async def comments_by_author(
    author_id: str,
    current_user: User = Depends(get_current_user),
    service: CommentService = Depends(get_comment_service),
):
    return await service.get_comments_by_author(current_user.id, author_id)


@router.get("/{comment_id}", response_model=ExtendedPostOut)
async def get_comment(
    comment_id: str,
    current_user: User = Depends(get_current_user),
    service: CommentService = Depends(get_comment_service),
):
    return await service.get_comment(current_user.id, comment_id)


@router.delete("/{comment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_comment(
    comment_id: str,
    current_user: User = Depends(get_current_user),
    service: CommentService = Depends(get_comment_service),
):
    await service.delete_comment(current_user.id, comment_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

from typing import List

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from socialnet.core.security import get_current_user
from socialnet.db.models.user import User
from socialnet.db.session import get_db
from socialnet.schemas.follow import FollowOut
from socialnet.services.follow import FollowService

router = APIRouter()


def get_follow_service(db: AsyncSession = Depends(get_db)) -> FollowService:
    return FollowService(db)


@router.get("/", response_model=List[FollowOut])
async def all_follows(
    current_user: User = Depends(get_current_user),
    service: FollowService = Depends(get_follow_service),
):
    return await service.list_all()


@router.post("/{user_id}", response_model=FollowOut, status_code=status.HTTP_201_CREATED)
async def follow(
    user_id: str,
    current_user: User = Depends(get_current_user),
    service: FollowService = Depends(get_follow_service),
):
    return await service.follow(current_user.id, user_id)


@router.get("/{user_id}", response_model=FollowOut)
async def get_follow(
    user_id: str,
    current_user: User = Depends(get_current_user),
    service: FollowService = Depends(get_follow_service),
):
    return await service.get_follow(current_user.id, user_id)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def unfollow(
    user_id: str,
    current_user: User = Depends(get_current_user),
    service: FollowService = Depends(get_follow_service),
):
    await service.unfollow(current_user.id, user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

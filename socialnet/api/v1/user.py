from typing import List

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from socialnet.core.pagination import offset_params
from socialnet.core.security import get_current_user
from socialnet.core.storage import get_signer
from socialnet.db.models.user import User
from socialnet.db.session import get_db
from socialnet.schemas.user import UserMeOut, UserOut, UserProfileOut, UserUpdate, UserUpdateOut
from socialnet.services.user import UserService

router = APIRouter()


def get_user_service(db: AsyncSession = Depends(get_db), signer=Depends(get_signer)) -> UserService:
    return UserService(db, signer)


@router.get("/me", response_model=UserMeOut)
async def read_me(current_user: User = Depends(get_current_user), service: UserService = Depends(get_user_service)):
    return await service.get_me(current_user.id)


@router.patch("/me", response_model=UserUpdateOut)
async def update_me(
    changes: UserUpdate,
    current_user: User = Depends(get_current_user),
    service: UserService = Depends(get_user_service),
):
    return await service.update_user(
        current_user.id,
        name=changes.name,
        password=changes.password,
        visibility=changes.visibility,
        profile_picture=changes.profile_picture,
    )


@router.delete("/me", status_code=status.HTTP_204_NO_CONTENT)
async def delete_me(current_user: User = Depends(get_current_user), service: UserService = Depends(get_user_service)):
    await service.delete_user(current_user.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# Followed users and public accounts, excluding the current user
@router.get("/recommendations", response_model=List[UserOut])
async def recommendations(
    options: dict = Depends(offset_params),
    current_user: User = Depends(get_current_user),
    service: UserService = Depends(get_user_service),
):
    return await service.get_user_recommendations(current_user.id, options)


@router.get("/search", response_model=List[UserOut])
async def search(
    username: str,
    current_user: User = Depends(get_current_user),
    service: UserService = Depends(get_user_service),
):
    return await service.search_by_username(username)


@router.get("/{user_id}", response_model=UserProfileOut)
async def profile(
    user_id: str,
    current_user: User = Depends(get_current_user),
    service: UserService = Depends(get_user_service),
):
    return await service.get_user_profile(current_user.id, user_id)

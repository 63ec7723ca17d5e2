from typing import List, Optional

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from socialnet.core.security import get_current_user
from socialnet.db.models.user import User
from socialnet.db.session import get_db
from socialnet.schemas.reaction import ReactionIn, ReactionOut
from socialnet.services.reaction import ReactionService

router = APIRouter()


def get_reaction_service(db: AsyncSession = Depends(get_db)) -> ReactionService:
    return ReactionService(db)


@router.get("/", response_model=List[ReactionOut])
async def all_reactions(
    current_user: User = Depends(get_current_user),
    service: ReactionService = Depends(get_reaction_service),
):
    return await service.get_all_reactions()


# Like or retweet a post
@router.post("/post/{post_id}", response_model=ReactionOut, status_code=status.HTTP_201_CREATED)
async def react(
    post_id: str,
    reaction: ReactionIn,
    current_user: User = Depends(get_current_user),
    service: ReactionService = Depends(get_reaction_service),
):
    return await service.create_reaction(current_user.id, post_id, reaction.action)


@router.delete("/post/{post_id}", status_code=status.HTTP_204_NO_CONTENT)
async def unreact(
    post_id: str,
    action: str,
    current_user: User = Depends(get_current_user),
    service: ReactionService = Depends(get_reaction_service),
):
    await service.delete_reaction(current_user.id, post_id, action)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/post/{post_id}", response_model=List[ReactionOut])
async def reactions_for_post(
    post_id: str,
    current_user: User = Depends(get_current_user),
    service: ReactionService = Depends(get_reaction_service),
):
    return await service.get_reactions_for_post(current_user.id, post_id)


@router.get("/author/{author_id}", response_model=List[ReactionOut])
async def reactions_by_author(
    author_id: str,
    action: Optional[str] = None,
    current_user: User = Depends(get_current_user),
    service: ReactionService = Depends(get_reaction_service),
):
    return await service.get_reactions_by_author(current_user.id, author_id, action)


@router.get("/author/{author_id}/likes", response_model=List[ReactionOut])
async def likes_by_author(
    author_id: str,
    current_user: User = Depends(get_current_user),
    service: ReactionService = Depends(get_reaction_service),
):
    return await service.get_likes_by_author(current_user.id, author_id)


@router.get("/author/{author_id}/retweets", response_model=List[ReactionOut])
async def retweets_by_author(
    author_id: str,
    current_user: User = Depends(get_current_user),
    service: ReactionService = Depends(get_reaction_service),
):
    return await service.get_retweets_by_author(current_user.id, author_id)


@router.get("/{reaction_id}", response_model=ReactionOut)
async def get_reaction(
    reaction_id: str,
    current_user: User = Depends(get_current_user),
    service: ReactionService = Depends(get_reaction_service),
):
    return await service.get_reaction(reaction_id)

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from socialnet.db.session import get_db
from socialnet.schemas.token import Token
from socialnet.schemas.user import UserBase, UserLogin
from socialnet.services.auth import AuthService

router = APIRouter()


def get_auth_service(db: AsyncSession = Depends(get_db)) -> AuthService:
    return AuthService(db)


@router.post("/signup", response_model=Token, status_code=status.HTTP_201_CREATED)
async def signup(user: UserBase, service: AuthService = Depends(get_auth_service)):
    return await service.signup(user.email, user.username, user.name, user.password)


# Login with email or username
@router.post("/login", response_model=Token)
async def login(credentials: UserLogin, service: AuthService = Depends(get_auth_service)):
    return await service.login(credentials.password, email=credentials.email, username=credentials.username)

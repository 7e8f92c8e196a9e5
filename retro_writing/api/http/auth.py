from typing import Optional

from fastapi import APIRouter, Depends, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession

from retro_writing.core.db import get_db
from retro_writing.core.exceptions import AuthError
from retro_writing.domains.identity.entities import User
from retro_writing.domains.identity.schemas import (
    UserCreate, UserLogin, UserSummary, AuthResponse, MeResponse
)
from retro_writing.domains.identity.services import IdentityService

router = APIRouter(prefix="/auth", tags=["authentication"])
# Отсутствие заголовка обрабатываем сами, чтобы вернуть 401, а не 403
security = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: AsyncSession = Depends(get_db)
) -> User:
    """Зависимость для получения текущего пользователя"""
    if credentials is None or not credentials.credentials:
        raise AuthError("Not authorized, no token")

    identity_service = IdentityService(db)
    return await identity_service.get_current_user_from_token(credentials.credentials)


@router.post("/signup", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def signup(
    user_data: UserCreate,
    db: AsyncSession = Depends(get_db)
):
    """Регистрация нового пользователя"""
    identity_service = IdentityService(db)
    user, token = await identity_service.register_user(user_data)

    return AuthResponse(
        message="User registered successfully",
        token=token,
        user=UserSummary.model_validate(user)
    )


@router.post("/login", response_model=AuthResponse)
async def login(
    login_data: UserLogin,
    db: AsyncSession = Depends(get_db)
):
    """Вход пользователя"""
    identity_service = IdentityService(db)
    user, token = await identity_service.login_user(login_data)

    return AuthResponse(
        message="Login successful",
        token=token,
        user=UserSummary.model_validate(user)
    )


@router.get("/me", response_model=MeResponse)
async def get_me(current_user: User = Depends(get_current_user)):
    """Информация о текущем пользователе"""
    return MeResponse(user=UserSummary.model_validate(current_user))

import logging
import uuid
from typing import Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from retro_writing.core.exceptions import AuthError, ValidationError
from retro_writing.core.security import create_access_token, verify_token
from retro_writing.db.repositories.user_repository import UserRepository
from retro_writing.domains.identity.entities import User
from retro_writing.domains.identity.schemas import UserCreate, UserLogin

logger = logging.getLogger(__name__)

# Одно сообщение для "нет такого email" и "неверный пароль"
INVALID_CREDENTIALS = "Invalid credentials"


class IdentityService:
    """Сервис для работы с идентификацией и аутентификацией пользователей"""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.user_repository = UserRepository(session)

    async def register_user(self, user_data: UserCreate) -> Tuple[User, str]:
        """Регистрация нового пользователя, сразу выдается токен"""
        if await self.user_repository.email_exists(user_data.email):
            raise ValidationError("Email already registered")

        if await self.user_repository.username_exists(user_data.username):
            raise ValidationError("Username already taken")

        user = User.create_user(
            email=user_data.email,
            username=user_data.username,
            password=user_data.password
        )
        created = await self.user_repository.create(user)
        logger.info("User %s registered", created.uuid)

        return created, create_access_token(str(created.uuid))

    async def authenticate_user(self, login_data: UserLogin) -> User:
        """Аутентификация пользователя"""
        user = await self.user_repository.get_by_email(login_data.email)

        if user is None or not user.authenticate(login_data.password):
            raise AuthError(INVALID_CREDENTIALS)

        return user

    async def login_user(self, login_data: UserLogin) -> Tuple[User, str]:
        """Вход пользователя и создание JWT токена"""
        user = await self.authenticate_user(login_data)
        return user, create_access_token(str(user.uuid))

    async def get_current_user_from_token(self, token: str) -> User:
        """Получение текущего пользователя из JWT токена"""
        payload = verify_token(token)
        if payload is None:
            raise AuthError("Not authorized, token failed")

        try:
            user_uuid = uuid.UUID(str(payload.get("sub")))
        except ValueError:
            raise AuthError("Not authorized, token failed")

        user = await self.user_repository.get_by_uuid(user_uuid)
        if user is None:
            raise AuthError("Not authorized, token failed")

        return user

from typing import Optional
import uuid

from sqlalchemy import exists, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from retro_writing.core.exceptions import ValidationError
from retro_writing.db.models.user import User as UserModel
from retro_writing.domains.identity.entities import User


class UserRepository:
    """Учетные записи. Email хранится уже приведенным к нижнему регистру."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, user: User) -> User:
        row = UserModel(
            uuid=user.uuid,
            email=user.email,
            username=user.username,
            password_hash=user.password_hash,
            created_at=user.created_at,
            updated_at=user.updated_at
        )
        self.session.add(row)

        try:
            await self.session.commit()
        except IntegrityError:
            # Уникальный индекс сработал между проверкой и вставкой
            await self.session.rollback()
            raise ValidationError("User with this email or username already exists")

        await self.session.refresh(row)
        return self._to_domain(row)

    async def get_by_uuid(self, user_uuid: uuid.UUID) -> Optional[User]:
        return await self._first(UserModel.uuid == user_uuid)

    async def get_by_email(self, email: str) -> Optional[User]:
        return await self._first(UserModel.email == email.strip().lower())

    async def email_exists(self, email: str) -> bool:
        return await self._exists(UserModel.email == email.strip().lower())

    async def username_exists(self, username: str) -> bool:
        return await self._exists(UserModel.username == username)

    async def _first(self, criterion) -> Optional[User]:
        row = (await self.session.execute(select(UserModel).where(criterion))).scalar_one_or_none()
        return self._to_domain(row) if row is not None else None

    async def _exists(self, criterion) -> bool:
        return bool(await self.session.scalar(select(exists().where(criterion))))

    @staticmethod
    def _to_domain(row: UserModel) -> User:
        return User(
            uuid=row.uuid,
            email=row.email,
            username=row.username,
            password_hash=row.password_hash,
            created_at=row.created_at,
            updated_at=row.updated_at
        )

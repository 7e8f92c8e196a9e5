import uuid
from datetime import datetime, timezone
from typing import Optional

from retro_writing.core.security import get_password_hash, verify_password


class User:
    """Учетная запись автора документов.

    Пароль в открытом виде не хранится и не покидает сущность:
    наружу (в ответы API) отдаются только id, username, email и created_at.
    """

    def __init__(
        self,
        uuid: uuid.UUID,
        email: str,
        username: str,
        password_hash: str,
        created_at: Optional[datetime] = None,
        updated_at: Optional[datetime] = None
    ):
        self.uuid = uuid
        self.email = email
        self.username = username
        self.password_hash = password_hash
        self.created_at = created_at or datetime.now(timezone.utc)
        self.updated_at = updated_at or self.created_at

    @classmethod
    def create_user(cls, email: str, username: str, password: str) -> "User":
        return cls(
            uuid=uuid.uuid4(),
            email=email.strip().lower(),
            username=username.strip(),
            password_hash=get_password_hash(password)
        )

    def authenticate(self, password: str) -> bool:
        return verify_password(password, self.password_hash)

    def __eq__(self, other) -> bool:
        return isinstance(other, User) and self.uuid == other.uuid

    def __repr__(self) -> str:
        return f"User(uuid={self.uuid}, username={self.username})"

from retro_writing.domains.identity.entities import User
from retro_writing.domains.identity.schemas import (
    UserCreate, UserLogin, UserSummary, AuthResponse, MeResponse
)

__all__ = [
    "User",
    "UserCreate", "UserLogin", "UserSummary", "AuthResponse", "MeResponse",
]

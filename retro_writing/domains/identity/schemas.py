import re
import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, EmailStr, Field, field_validator, ConfigDict

USERNAME_RE = re.compile(r"^[A-Za-z0-9]+$")


class UserCreate(BaseModel):
    """Схема для регистрации пользователя"""
    username: str = Field(..., min_length=3, max_length=30)
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=128)

    @field_validator("username", mode="before")
    @classmethod
    def strip_username(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("username")
    @classmethod
    def validate_username(cls, v):
        if not USERNAME_RE.match(v):
            raise ValueError("Username must contain only letters and numbers")
        return v

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, v):
        return v.strip().lower() if isinstance(v, str) else v


class UserLogin(BaseModel):
    """Схема для входа пользователя"""
    email: EmailStr
    password: str = Field(..., min_length=1)

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, v):
        return v.strip().lower() if isinstance(v, str) else v


class UserSummary(BaseModel):
    """Публичные данные пользователя (без пароля)"""
    id: uuid.UUID = Field(validation_alias="uuid")
    username: str
    email: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)


class AuthResponse(BaseModel):
    """Ответ на signup/login"""
    success: bool = True
    message: Optional[str] = None
    token: str
    user: UserSummary


class MeResponse(BaseModel):
    success: bool = True
    user: UserSummary

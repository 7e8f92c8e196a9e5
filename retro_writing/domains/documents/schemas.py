from pydantic import BaseModel, Field, ConfigDict
from typing import Optional, List
import uuid
from datetime import datetime


class DocumentCreate(BaseModel):
    """Схема для создания документа.

    Ограничения на длину заголовка и статус проверяет сама сущность,
    чтобы правила не зависели от транспорта.
    """
    title: Optional[str] = None
    content: Optional[str] = None
    tags: Optional[List[str]] = None
    status: Optional[str] = None


class DocumentUpdate(BaseModel):
    """Схема для частичного обновления документа"""
    title: Optional[str] = None
    content: Optional[str] = None
    tags: Optional[List[str]] = None
    status: Optional[str] = None


class DocumentAuthor(BaseModel):
    """Автор документа: публичные поля пользователя"""
    id: uuid.UUID = Field(validation_alias="uuid")
    username: str
    email: str

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)


class DocumentResponse(BaseModel):
    """Схема записи документа в ответе"""
    id: uuid.UUID
    title: str
    content: str
    author: DocumentAuthor
    status: str
    word_count: int
    tags: List[str]
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entity(cls, document, author) -> "DocumentResponse":
        """Запись документа; автор передается отдельно, так как в сущности только owner_id"""
        return cls(
            id=document.uuid,
            title=document.title,
            content=document.content,
            author=DocumentAuthor.model_validate(author),
            status=document.status,
            word_count=document.word_count,
            tags=document.tags,
            created_at=document.created_at,
            updated_at=document.updated_at
        )


class DocumentEnvelope(BaseModel):
    success: bool = True
    message: Optional[str] = None
    data: DocumentResponse


class DocumentListEnvelope(BaseModel):
    success: bool = True
    count: int
    data: List[DocumentResponse]


class MessageResponse(BaseModel):
    success: bool = True
    message: Optional[str] = None

import uuid

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from retro_writing.api.http.auth import get_current_user
from retro_writing.core.db import get_db
from retro_writing.core.exceptions import InvalidArgumentError
from retro_writing.domains.documents.schemas import (
    DocumentCreate, DocumentUpdate, DocumentResponse,
    DocumentEnvelope, DocumentListEnvelope, MessageResponse
)
from retro_writing.domains.documents.services import DocumentService
from retro_writing.domains.identity.entities import User

router = APIRouter(prefix="/documents", tags=["documents"])


def _parse_document_id(document_id: str) -> uuid.UUID:
    try:
        return uuid.UUID(document_id)
    except ValueError:
        raise InvalidArgumentError("Invalid document ID")


def _to_list(documents, owner: User) -> DocumentListEnvelope:
    return DocumentListEnvelope(
        count=len(documents),
        data=[DocumentResponse.from_entity(doc, owner) for doc in documents]
    )


@router.get("", response_model=DocumentListEnvelope)
async def get_documents(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Все документы пользователя, свежие первыми"""
    documents = await DocumentService(db).list_owned(current_user.uuid)
    return _to_list(documents, current_user)


# Объявлен раньше /{document_id}, иначе "search" примется за id
@router.get("/search", response_model=DocumentListEnvelope)
async def search_documents(
    q: str = Query(default=""),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Поиск по заголовку и содержимому"""
    documents = await DocumentService(db).search(current_user.uuid, q)
    return _to_list(documents, current_user)


@router.post("", response_model=DocumentEnvelope, status_code=status.HTTP_201_CREATED)
async def create_document(
    document_data: DocumentCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Создание нового документа"""
    document = await DocumentService(db).create_document(current_user.uuid, document_data)

    return DocumentEnvelope(
        message="Document created successfully",
        data=DocumentResponse.from_entity(document, current_user)
    )


@router.get("/{document_id}", response_model=DocumentEnvelope)
async def get_document(
    document_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Получение документа по id"""
    document = await DocumentService(db).find_owned(
        current_user.uuid, _parse_document_id(document_id)
    )
    return DocumentEnvelope(data=DocumentResponse.from_entity(document, current_user))


@router.put("/{document_id}", response_model=DocumentEnvelope)
async def update_document(
    document_id: str,
    update_data: DocumentUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Обновление документа"""
    document = await DocumentService(db).update_document(
        current_user.uuid, _parse_document_id(document_id), update_data
    )

    return DocumentEnvelope(
        message="Document updated successfully",
        data=DocumentResponse.from_entity(document, current_user)
    )


@router.delete("/{document_id}", response_model=MessageResponse)
async def delete_document(
    document_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Мягкое удаление документа"""
    await DocumentService(db).soft_delete(current_user.uuid, _parse_document_id(document_id))
    return MessageResponse(message="Document deleted successfully")

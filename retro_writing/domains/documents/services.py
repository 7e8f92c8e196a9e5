import logging
import uuid
from typing import List

from sqlalchemy.ext.asyncio import AsyncSession

from retro_writing.core.exceptions import InvalidArgumentError, NotFoundError
from retro_writing.db.repositories.document_repository import DocumentRepository
from retro_writing.domains.documents.entities import Document
from retro_writing.domains.documents.schemas import DocumentCreate, DocumentUpdate

logger = logging.getLogger(__name__)


class DocumentService:
    """Правила жизненного цикла документа.

    Все операции выполняются от имени владельца: документ другого
    пользователя и мягко удаленный документ для сервиса не существуют
    (NotFoundError), даже если известен их id.
    """

    def __init__(self, session: AsyncSession):
        self.session = session
        self.document_repository = DocumentRepository(session)

    async def create_document(self, owner_id: uuid.UUID, document_data: DocumentCreate) -> Document:
        """Создание нового документа"""
        document = Document.create_document(
            owner_id=owner_id,
            title=document_data.title,
            content=document_data.content,
            tags=document_data.tags,
            status=document_data.status
        )

        created = await self.document_repository.create(document)
        logger.info("Document %s created by %s", created.uuid, owner_id)
        return created

    async def find_owned(self, owner_id: uuid.UUID, document_uuid: uuid.UUID) -> Document:
        """Документ владельца или NotFoundError"""
        document = await self.document_repository.get_owned(document_uuid, owner_id)

        if document is None:
            raise NotFoundError("Document not found")

        return document

    async def list_owned(self, owner_id: uuid.UUID) -> List[Document]:
        return await self.document_repository.list_owned(owner_id)

    async def search(self, owner_id: uuid.UUID, query: str) -> List[Document]:
        """Поиск по заголовку и содержимому"""
        if not query:
            raise InvalidArgumentError("Search query required")

        return await self.document_repository.search_owned(owner_id, query)

    async def update_document(
        self,
        owner_id: uuid.UUID,
        document_uuid: uuid.UUID,
        update_data: DocumentUpdate
    ) -> Document:
        """Обновление только переданных полей"""
        document = await self.find_owned(owner_id, document_uuid)

        changes = update_data.model_dump(exclude_unset=True)
        if not document.apply_changes(changes):
            return document

        return await self.document_repository.update(document)

    async def soft_delete(self, owner_id: uuid.UUID, document_uuid: uuid.UUID) -> None:
        """Мягкое удаление; повторный вызов дает NotFoundError"""
        document = await self.find_owned(owner_id, document_uuid)

        document.soft_delete()
        await self.document_repository.update(document)
        logger.info("Document %s soft-deleted by %s", document_uuid, owner_id)

from typing import Optional, List
import uuid

from sqlalchemy import select, update, and_, or_
from sqlalchemy.ext.asyncio import AsyncSession

from retro_writing.db.models.document import Document as DocumentModel
from retro_writing.domains.documents.entities import Document


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _visible_to(owner_id: uuid.UUID):
    """Условие видимости: документ владельца и не помечен удаленным"""
    return and_(
        DocumentModel.owner_id == owner_id,
        DocumentModel.is_deleted.is_(False)
    )


class DocumentRepository:
    """Доступ к таблице документов.

    Здесь только запросы. Правила владения, мягкого удаления и пересчета
    полей живут в `DocumentService`. Методы с `owned` в названии всегда
    отфильтровывают чужие и удаленные документы.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, document: Document) -> Document:
        row = DocumentModel(
            uuid=document.uuid,
            owner_id=document.owner_id,
            **self._editable_columns(document),
            created_at=document.created_at
        )

        self.session.add(row)
        await self.session.commit()
        await self.session.refresh(row)
        return self._to_domain(row)

    async def get_by_uuid(self, document_uuid: uuid.UUID) -> Optional[Document]:
        """Запись по UUID без фильтров владельца и удаления"""
        stmt = (
            select(DocumentModel)
            .where(DocumentModel.uuid == document_uuid)
            .execution_options(populate_existing=True)
        )
        return await self._fetch_one(stmt)

    async def get_owned(self, document_uuid: uuid.UUID, owner_id: uuid.UUID) -> Optional[Document]:
        stmt = select(DocumentModel).where(
            DocumentModel.uuid == document_uuid,
            _visible_to(owner_id)
        )
        return await self._fetch_one(stmt)

    async def list_owned(self, owner_id: uuid.UUID) -> List[Document]:
        """Свежие первыми"""
        return await self._fetch_all(select(DocumentModel).where(_visible_to(owner_id)))

    async def search_owned(self, owner_id: uuid.UUID, query: str) -> List[Document]:
        """Подстрока без учета регистра в заголовке или содержимом; % и _ ищутся буквально"""
        pattern = f"%{_escape_like(query)}%"
        stmt = select(DocumentModel).where(
            _visible_to(owner_id),
            or_(
                DocumentModel.title.ilike(pattern, escape="\\"),
                DocumentModel.content.ilike(pattern, escape="\\")
            )
        )
        return await self._fetch_all(stmt)

    async def update(self, document: Document) -> Document:
        """Запись всех изменяемых полей; возвращает сохраненное состояние"""
        stmt = (
            update(DocumentModel)
            .where(DocumentModel.uuid == document.uuid)
            .values(**self._editable_columns(document))
        )

        await self.session.execute(stmt)
        await self.session.commit()

        return await self.get_by_uuid(document.uuid)

    async def _fetch_one(self, stmt) -> Optional[Document]:
        row = (await self.session.execute(stmt)).scalar_one_or_none()
        return self._to_domain(row) if row is not None else None

    async def _fetch_all(self, stmt) -> List[Document]:
        result = await self.session.execute(stmt.order_by(DocumentModel.updated_at.desc()))
        return [self._to_domain(row) for row in result.scalars().all()]

    @staticmethod
    def _editable_columns(document: Document) -> dict:
        return {
            "title": document.title,
            "content": document.content,
            "status": document.status,
            "word_count": document.word_count,
            "tags": list(document.tags),
            "is_deleted": document.is_deleted,
            "updated_at": document.updated_at,
        }

    @staticmethod
    def _to_domain(row: DocumentModel) -> Document:
        return Document(
            uuid=row.uuid,
            owner_id=row.owner_id,
            title=row.title,
            content=row.content,
            status=row.status,
            tags=row.tags or [],
            word_count=row.word_count,
            is_deleted=row.is_deleted,
            created_at=row.created_at,
            updated_at=row.updated_at
        )

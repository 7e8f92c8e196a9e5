"""
Tests for DocumentService
Tests for: ownership, soft delete, partial updates, search
"""
import uuid

import pytest

from retro_writing.core.exceptions import InvalidArgumentError, NotFoundError, ValidationError
from retro_writing.db.repositories.document_repository import DocumentRepository
from retro_writing.domains.documents.entities import DEFAULT_TITLE
from retro_writing.domains.documents.schemas import DocumentCreate, DocumentUpdate
from retro_writing.domains.documents.services import DocumentService


@pytest.fixture
def service(db_session):
    return DocumentService(db_session)


@pytest.fixture
def owner_id(test_user):
    user, _ = test_user
    return user.uuid


@pytest.fixture
def stranger_id(other_user):
    user, _ = other_user
    return user.uuid


@pytest.mark.asyncio
class TestCreateAndFind:

    async def test_create_with_defaults(self, service, owner_id):
        document = await service.create_document(owner_id, DocumentCreate())

        assert document.title == DEFAULT_TITLE
        assert document.content == ""
        assert document.word_count == 0
        assert document.owner_id == owner_id

    async def test_find_owned(self, service, owner_id):
        created = await service.create_document(
            owner_id, DocumentCreate(title="Notes", content="<p>Hello world</p>")
        )

        found = await service.find_owned(owner_id, created.uuid)

        assert found.uuid == created.uuid
        assert found.title == "Notes"
        assert found.word_count == 2

    async def test_foreign_document_is_not_found(self, service, owner_id, stranger_id):
        created = await service.create_document(owner_id, DocumentCreate(title="Private"))

        with pytest.raises(NotFoundError):
            await service.find_owned(stranger_id, created.uuid)

    async def test_unknown_id_is_not_found(self, service, owner_id):
        with pytest.raises(NotFoundError) as exc_info:
            await service.find_owned(owner_id, uuid.uuid4())

        assert exc_info.value.message == "Document not found"


@pytest.mark.asyncio
class TestListAndSearch:

    async def test_list_is_isolated_and_most_recent_first(self, service, owner_id, stranger_id):
        first = await service.create_document(owner_id, DocumentCreate(title="First"))
        second = await service.create_document(owner_id, DocumentCreate(title="Second"))
        await service.create_document(stranger_id, DocumentCreate(title="Foreign"))

        documents = await service.list_owned(owner_id)
        assert [d.uuid for d in documents] == [second.uuid, first.uuid]

        await service.update_document(owner_id, first.uuid, DocumentUpdate(content="touched"))
        documents = await service.list_owned(owner_id)
        assert documents[0].uuid == first.uuid

    async def test_search_matches_title_or_content_case_insensitive(self, service, owner_id):
        await service.create_document(owner_id, DocumentCreate(title="Shopping list"))
        await service.create_document(owner_id, DocumentCreate(title="Diary", content="went SHOPPING"))
        await service.create_document(owner_id, DocumentCreate(title="Other"))

        results = await service.search(owner_id, "shopping")

        assert sorted(d.title for d in results) == ["Diary", "Shopping list"]

    async def test_search_treats_wildcards_literally(self, service, owner_id):
        await service.create_document(owner_id, DocumentCreate(title="100% done"))
        await service.create_document(owner_id, DocumentCreate(title="1000 words"))

        results = await service.search(owner_id, "0%")

        assert [d.title for d in results] == ["100% done"]

    async def test_search_excludes_foreign_documents(self, service, owner_id, stranger_id):
        await service.create_document(stranger_id, DocumentCreate(title="secret plan"))

        assert await service.search(owner_id, "secret") == []

    async def test_empty_query_rejected(self, service, owner_id):
        with pytest.raises(InvalidArgumentError) as exc_info:
            await service.search(owner_id, "")

        assert exc_info.value.message == "Search query required"

    async def test_space_query_is_a_substring(self, service, owner_id):
        await service.create_document(owner_id, DocumentCreate(title="two words"))
        await service.create_document(owner_id, DocumentCreate(title="single"))

        results = await service.search(owner_id, " ")

        assert [d.title for d in results] == ["two words"]


@pytest.mark.asyncio
class TestUpdate:

    async def test_partial_update_keeps_other_fields(self, service, owner_id):
        created = await service.create_document(
            owner_id, DocumentCreate(title="Keep me", content="old words here", tags=["x"])
        )

        updated = await service.update_document(
            owner_id, created.uuid, DocumentUpdate(content="<p>new</p>")
        )

        assert updated.title == "Keep me"
        assert updated.tags == ["x"]
        assert updated.content == "<p>new</p>"
        assert updated.word_count == 1

    async def test_resaving_same_content_keeps_word_count(self, service, owner_id):
        created = await service.create_document(
            owner_id, DocumentCreate(content="<h1>Title</h1><p>two words</p>")
        )

        first = await service.update_document(
            owner_id, created.uuid, DocumentUpdate(content=created.content)
        )
        second = await service.update_document(
            owner_id, created.uuid, DocumentUpdate(content=created.content)
        )

        assert created.word_count == first.word_count == second.word_count == 2

    async def test_blank_title_rejected(self, service, owner_id):
        created = await service.create_document(owner_id, DocumentCreate(title="Title"))

        with pytest.raises(ValidationError):
            await service.update_document(owner_id, created.uuid, DocumentUpdate(title=" "))

        found = await service.find_owned(owner_id, created.uuid)
        assert found.title == "Title"

    async def test_update_foreign_document_is_not_found(self, service, owner_id, stranger_id):
        created = await service.create_document(owner_id, DocumentCreate(title="Mine"))

        with pytest.raises(NotFoundError):
            await service.update_document(stranger_id, created.uuid, DocumentUpdate(title="Theirs"))

        found = await service.find_owned(owner_id, created.uuid)
        assert found.title == "Mine"


@pytest.mark.asyncio
class TestSoftDelete:

    async def test_deleted_document_disappears_from_owner_queries(self, service, owner_id, db_session):
        created = await service.create_document(owner_id, DocumentCreate(title="Doomed"))

        await service.soft_delete(owner_id, created.uuid)

        with pytest.raises(NotFoundError):
            await service.find_owned(owner_id, created.uuid)
        assert await service.list_owned(owner_id) == []
        assert await service.search(owner_id, "Doomed") == []

        # Запись физически остается, только с флагом
        stored = await DocumentRepository(db_session).get_by_uuid(created.uuid)
        assert stored is not None
        assert stored.is_deleted is True

    async def test_delete_twice_is_not_found(self, service, owner_id):
        created = await service.create_document(owner_id, DocumentCreate())
        await service.soft_delete(owner_id, created.uuid)

        with pytest.raises(NotFoundError):
            await service.soft_delete(owner_id, created.uuid)

    async def test_delete_foreign_document_is_not_found(self, service, owner_id, stranger_id, db_session):
        created = await service.create_document(owner_id, DocumentCreate())

        with pytest.raises(NotFoundError):
            await service.soft_delete(stranger_id, created.uuid)

        stored = await DocumentRepository(db_session).get_by_uuid(created.uuid)
        assert stored.is_deleted is False

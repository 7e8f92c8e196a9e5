"""
Синхронизация активного документа с сервером.

Контроллер держит в памяти заголовок и содержимое открытого документа,
сохраняет их с задержкой (debounce) и при недоступном сервере
откатывается на локальную копию списка документов.

Состояния активного документа:

    CLEAN        поля совпадают с последним сохраненным снимком
    DIRTY        есть несохраненные изменения, таймер взведен
    SAVING       запрос на сохранение в полете
    SAVE_FAILED  последнее сохранение не удалось, поля остались в памяти

Для одного документа одновременно выполняется не больше одного сохранения:
правки во время SAVING применяются к памяти и подхватываются следующим
циклом таймера, когда текущий запрос завершится. Сохранения разных
документов независимы.

Все методы, которые взводят таймер (`edit`, `flush`), должны вызываться
из работающего event loop.
"""
import asyncio
import logging
from enum import Enum
from typing import Any, Dict, List, Optional, Set, Tuple

from retro_writing.client.api import ApiError, DocumentApiClient
from retro_writing.client.storage import KeyValueStore, load_from_local, save_to_local
from retro_writing.domains.documents.entities import DEFAULT_TITLE

logger = logging.getLogger(__name__)

DOCUMENTS_CACHE_KEY = "documents"
DEFAULT_DEBOUNCE_SECONDS = 3.0


class SyncState(str, Enum):
    CLEAN = "clean"
    DIRTY = "dirty"
    SAVING = "saving"
    SAVE_FAILED = "save_failed"


INDICATORS = {
    SyncState.CLEAN: "Saved",
    SyncState.DIRTY: "Unsaved changes",
    SyncState.SAVING: "Saving...",
    SyncState.SAVE_FAILED: "Save failed",
}


def document_id(document: Dict[str, Any]) -> Optional[str]:
    """id записи; в старых локальных копиях встречается `_id`"""
    value = document.get("id") or document.get("_id")
    return str(value) if value is not None else None


class DocumentSyncController:
    """Клиентский контроллер автосохранения активного документа"""

    def __init__(
        self,
        api: DocumentApiClient,
        store: KeyValueStore,
        debounce_seconds: float = DEFAULT_DEBOUNCE_SECONDS,
        cache_key: str = DOCUMENTS_CACHE_KEY
    ):
        self.api = api
        self.store = store
        self.debounce_seconds = debounce_seconds
        self.cache_key = cache_key

        self.documents: List[Dict[str, Any]] = []
        self.active: Optional[Dict[str, Any]] = None
        self.title = DEFAULT_TITLE
        self.content = ""
        self.state = SyncState.CLEAN
        self.loaded_from_cache = False

        self._baseline: Tuple[str, str] = (self.title, self.content)
        self._timer: Optional[asyncio.Task] = None
        self._in_flight: Dict[str, asyncio.Task] = {}
        self._edited_during_save: Set[str] = set()

    @property
    def active_id(self) -> Optional[str]:
        return document_id(self.active) if self.active else None

    @property
    def indicator(self) -> str:
        return INDICATORS[self.state]

    @property
    def is_saving(self) -> bool:
        return self.active_id is not None and self.active_id in self._in_flight

    # Загрузка и выбор документа

    async def load(self) -> List[Dict[str, Any]]:
        """Загрузить список с сервера, при ошибке из локальной копии.

        Источники не сливаются: побеждает один целиком.
        """
        try:
            documents = await self.api.list_documents()
            self.loaded_from_cache = False
        except ApiError as e:
            logger.warning("Failed to load documents, using local copy: %s", e)
            cached = load_from_local(self.store, self.cache_key)
            documents = cached if isinstance(cached, list) else []
            self.loaded_from_cache = True

        self.documents = list(documents)
        if self.documents:
            self.select(self.documents[0])
        else:
            self.clear_active()
        return self.documents

    def select(self, document: Dict[str, Any]) -> None:
        """Сделать документ активным; взведенный таймер предыдущего сбрасывается"""
        self._cancel_timer()

        self.active = document
        self.title = document.get("title") or DEFAULT_TITLE
        self.content = document.get("content") or ""
        self._baseline = (self.title, self.content)
        self.state = SyncState.SAVING if self.is_saving else SyncState.CLEAN

    def clear_active(self) -> None:
        self._cancel_timer()

        self.active = None
        self.title = DEFAULT_TITLE
        self.content = ""
        self._baseline = (self.title, self.content)
        self.state = SyncState.CLEAN

    # Правки

    def edit(self, title: Optional[str] = None, content: Optional[str] = None) -> None:
        """Применить правку к памяти и (пере)взвести таймер сохранения"""
        new_fields = (
            self.title if title is None else title,
            self.content if content is None else content,
        )
        if new_fields == (self.title, self.content):
            return

        self.title, self.content = new_fields

        doc_id = self.active_id
        if doc_id is None:
            return

        if doc_id in self._in_flight:
            # Второе сохранение параллельно не запускаем
            self._edited_during_save.add(doc_id)
            return

        self.state = SyncState.DIRTY
        self._arm_timer()

    async def flush(self) -> None:
        """Сохранить несохраненные изменения сейчас, не дожидаясь таймера"""
        if self.state == SyncState.DIRTY and self.active_id is not None:
            self._cancel_timer()
            self._start_save(self.active_id)
        await self.wait_idle()

    async def wait_idle(self) -> None:
        """Дождаться завершения всех сохранений в полете"""
        if self._in_flight:
            await asyncio.gather(*list(self._in_flight.values()))

    async def close(self) -> None:
        """Сохранить несохраненное и дождаться всех запросов"""
        await self.flush()
        # Правки, отложенные во время сохранения, уходят еще одним циклом
        if self.state == SyncState.DIRTY:
            await self.flush()
        self._cancel_timer()

    # Создание и удаление

    async def create_document(self) -> Optional[Dict[str, Any]]:
        """Создать пустой документ, поставить его первым и открыть"""
        try:
            document = await self.api.create_document({"title": DEFAULT_TITLE, "content": ""})
        except ApiError as e:
            logger.error("Failed to create document: %s", e)
            return None

        self.documents = [document] + self.documents
        self.select(document)
        return document

    async def delete_document(self, doc_id: str) -> bool:
        """Удалить документ (вызывается после подтверждения пользователем)"""
        try:
            await self.api.delete_document(doc_id)
        except ApiError as e:
            logger.error("Failed to delete document %s: %s", doc_id, e)
            return False

        # Список читается после await, чтобы не потерять параллельные удаления
        self.documents = [d for d in self.documents if document_id(d) != doc_id]

        if self.active_id == doc_id:
            if self.documents:
                self.select(self.documents[0])
            else:
                self.clear_active()
        return True

    # Таймер и сохранение

    def _arm_timer(self) -> None:
        self._cancel_timer()
        loop = asyncio.get_running_loop()
        self._timer = loop.create_task(self._save_after_quiet_period(self.active_id))

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    async def _save_after_quiet_period(self, doc_id: str) -> None:
        await asyncio.sleep(self.debounce_seconds)
        self._timer = None
        if self.active_id == doc_id:
            self._start_save(doc_id)

    def _start_save(self, doc_id: str) -> None:
        snapshot = {"title": self.title, "content": self.content}
        self.state = SyncState.SAVING
        loop = asyncio.get_running_loop()
        self._in_flight[doc_id] = loop.create_task(self._persist(doc_id, snapshot))

    async def _persist(self, doc_id: str, snapshot: Dict[str, str]) -> None:
        updated = None
        try:
            updated = await self.api.update_document(doc_id, snapshot)
        except ApiError as e:
            logger.error("Save failed for document %s: %s", doc_id, e)
        finally:
            self._in_flight.pop(doc_id, None)

        edited = doc_id in self._edited_during_save
        self._edited_during_save.discard(doc_id)

        if updated is not None:
            self._on_saved(doc_id, snapshot, updated, edited)
        else:
            self._on_save_failed(doc_id, snapshot, edited)

    def _on_saved(
        self,
        doc_id: str,
        snapshot: Dict[str, str],
        updated: Dict[str, Any],
        edited: bool
    ) -> None:
        # Новый список строится из текущего, а не из снимка на момент запуска
        self.documents = [updated if document_id(d) == doc_id else d for d in self.documents]

        if self.active_id != doc_id:
            return

        self.active = updated
        saved_fields = (snapshot["title"], snapshot["content"])
        self._baseline = saved_fields

        if edited:
            self.state = SyncState.DIRTY
            self._arm_timer()
            return

        if (self.title, self.content) != saved_fields:
            # Документ переоткрыли во время сохранения: в памяти старая запись
            self.title = updated.get("title") or DEFAULT_TITLE
            self.content = updated.get("content") or ""
            self._baseline = (self.title, self.content)
        self.state = SyncState.CLEAN

    def _on_save_failed(self, doc_id: str, snapshot: Dict[str, str], edited: bool) -> None:
        if self.active_id == doc_id:
            if edited:
                self.state = SyncState.DIRTY
                self._arm_timer()
            else:
                self.state = SyncState.SAVE_FAILED

        save_to_local(self.store, self.cache_key, self._documents_with_unsaved(doc_id, snapshot))

    def _documents_with_unsaved(self, doc_id: str, snapshot: Dict[str, str]) -> List[Dict[str, Any]]:
        """Копия списка, где запись документа несет несохраненные поля"""
        if self.active_id == doc_id:
            snapshot = {"title": self.title, "content": self.content}
        return [dict(d, **snapshot) if document_id(d) == doc_id else d for d in self.documents]

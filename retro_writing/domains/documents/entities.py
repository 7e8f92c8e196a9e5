import re
import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Optional, List, Dict, Any

from retro_writing.core.exceptions import ValidationError

DEFAULT_TITLE = "Untitled Document"
TITLE_MAX_LENGTH = 200

_TAG_RE = re.compile(r"<[^>]*>")
# Фиксированный набор разделителей слов: U+FEFF входит, U+0085 и U+001C-U+001F нет
# (в отличие от \s и str.strip() без аргументов)
WORD_SEPARATORS = (
    "\t\n\v\f\r \u00a0\u1680\u2000\u2001\u2002\u2003\u2004\u2005\u2006"
    "\u2007\u2008\u2009\u200a\u2028\u2029\u202f\u205f\u3000\ufeff"
)
_WHITESPACE_RE = re.compile("[" + WORD_SEPARATORS + "]+")


class DocumentStatus(str, Enum):
    """Допустимые статусы документа"""
    DRAFT = "draft"
    PUBLISHED = "published"
    ARCHIVED = "archived"


def count_words(content: Optional[str]) -> int:
    """Подсчет слов: теги <...> вырезаются, остаток делится по пробельным символам"""
    if not content:
        return 0
    plain_text = _TAG_RE.sub("", content)
    return len([word for word in _WHITESPACE_RE.split(plain_text.strip(WORD_SEPARATORS)) if word])


def _clean_title(title: Optional[str]) -> str:
    if title is None:
        return DEFAULT_TITLE
    title = title.strip()
    if not title:
        raise ValidationError("Document title is required")
    if len(title) > TITLE_MAX_LENGTH:
        raise ValidationError(f"Title cannot exceed {TITLE_MAX_LENGTH} characters")
    return title


def _clean_status(status: Optional[str]) -> str:
    if status is None:
        return DocumentStatus.DRAFT.value
    try:
        return DocumentStatus(status).value
    except ValueError:
        raise ValidationError("Invalid status value")


def _clean_tags(tags: Optional[List[str]]) -> List[str]:
    if tags is None:
        return []
    cleaned = []
    for tag in tags:
        if not isinstance(tag, str):
            raise ValidationError("Tags must be strings")
        cleaned.append(tag.strip())
    return cleaned


class Document:
    """Сущность документа домена Documents"""

    EDITABLE_FIELDS = ("title", "content", "tags", "status")

    def __init__(
        self,
        uuid: uuid.UUID,
        owner_id: uuid.UUID,
        title: str = DEFAULT_TITLE,
        content: str = "",
        status: str = DocumentStatus.DRAFT.value,
        tags: Optional[List[str]] = None,
        word_count: int = 0,
        is_deleted: bool = False,
        created_at: Optional[datetime] = None,
        updated_at: Optional[datetime] = None
    ):
        self.uuid = uuid
        self.owner_id = owner_id
        self.title = title
        self.content = content
        self.status = status
        self.tags = list(tags or [])
        self.word_count = word_count
        self.is_deleted = is_deleted
        self.created_at = created_at or datetime.now(timezone.utc)
        self.updated_at = updated_at or self.created_at

    @classmethod
    def create_document(
        cls,
        owner_id: uuid.UUID,
        title: Optional[str] = None,
        content: Optional[str] = None,
        tags: Optional[List[str]] = None,
        status: Optional[str] = None
    ) -> "Document":
        """Создание нового документа с применением значений по умолчанию"""
        content = content or ""
        return cls(
            uuid=uuid.uuid4(),
            owner_id=owner_id,
            title=_clean_title(title),
            content=content,
            status=_clean_status(status),
            tags=_clean_tags(tags),
            word_count=count_words(content),
        )

    def apply_changes(self, changes: Dict[str, Any]) -> bool:
        """Частичное обновление: меняются только переданные поля.

        Поля со значением None считаются непереданными. Количество слов
        пересчитывается только если изменилось содержимое. Возвращает True,
        если какое-то поле действительно изменилось.
        """
        changes = {k: v for k, v in changes.items() if k in self.EDITABLE_FIELDS and v is not None}

        # Сначала валидируем всё, чтобы не оставить сущность наполовину обновленной
        cleaned: Dict[str, Any] = {}
        if "title" in changes:
            cleaned["title"] = _clean_title(changes["title"])
        if "content" in changes:
            cleaned["content"] = changes["content"]
        if "tags" in changes:
            cleaned["tags"] = _clean_tags(changes["tags"])
        if "status" in changes:
            cleaned["status"] = _clean_status(changes["status"])

        changed = False
        for field, value in cleaned.items():
            if getattr(self, field) != value:
                setattr(self, field, value)
                changed = True

        if "content" in cleaned:
            self.word_count = count_words(self.content)

        if changed:
            self.updated_at = datetime.now(timezone.utc)
        return changed

    def soft_delete(self) -> None:
        """Пометить документ удаленным, запись остается в хранилище"""
        self.is_deleted = True
        self.updated_at = datetime.now(timezone.utc)

    def is_owned_by(self, user_id: uuid.UUID) -> bool:
        return self.owner_id == user_id

    def __eq__(self, other) -> bool:
        if not isinstance(other, Document):
            return False
        return self.uuid == other.uuid

    def __repr__(self) -> str:
        return f"Document(uuid={self.uuid}, title={self.title}, words={self.word_count})"

from retro_writing.domains.documents.entities import Document, DocumentStatus, count_words
from retro_writing.domains.documents.schemas import (
    DocumentCreate, DocumentUpdate, DocumentResponse,
    DocumentEnvelope, DocumentListEnvelope, MessageResponse
)

__all__ = [
    "Document", "DocumentStatus", "count_words",
    "DocumentCreate", "DocumentUpdate", "DocumentResponse",
    "DocumentEnvelope", "DocumentListEnvelope", "MessageResponse",
]

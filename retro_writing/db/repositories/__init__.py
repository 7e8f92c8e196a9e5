from retro_writing.db.repositories.user_repository import UserRepository
from retro_writing.db.repositories.document_repository import DocumentRepository

__all__ = [
    "UserRepository",
    "DocumentRepository",
]

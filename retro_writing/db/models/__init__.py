from retro_writing.db.models.user import User
from retro_writing.db.models.document import Document

__all__ = [
    "User",
    "Document",
]

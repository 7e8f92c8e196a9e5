from sqlalchemy import Column, String, Text, Integer, Boolean, ForeignKey, Index, JSON, Uuid
from sqlalchemy.orm import relationship

from retro_writing.db.base import BaseModel


class Document(BaseModel):
    __tablename__ = "documents"
    __table_args__ = (
        # Список документов пользователя сортируется по updated_at desc
        Index("ix_documents_owner_updated", "owner_id", "updated_at"),
    )

    title = Column(String(200), nullable=False, default="Untitled Document")
    content = Column(Text, nullable=False, default="")
    owner_id = Column(Uuid(as_uuid=True), ForeignKey("users.uuid"), nullable=False, index=True)
    status = Column(String(20), nullable=False, default="draft")
    word_count = Column(Integer, nullable=False, default=0)
    tags = Column(JSON, nullable=False, default=list)
    is_deleted = Column(Boolean, nullable=False, default=False)

    # Relationships
    owner = relationship("User", back_populates="documents")

from sqlalchemy import Column, String
from sqlalchemy.orm import relationship

from retro_writing.db.base import BaseModel


class User(BaseModel):
    __tablename__ = "users"

    email = Column(String(255), unique=True, index=True, nullable=False)
    username = Column(String(30), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=False)

    # Relationships
    documents = relationship("Document", back_populates="owner")

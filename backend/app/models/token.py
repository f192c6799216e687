"""
Issued OAuth token pair model.

Tokens reference an integration by id only; there is no foreign key, so
deleting an integration leaves its tokens in place. Deletion is a tombstone
(deleted_at) rather than a physical delete.
"""

from sqlalchemy import Column, Integer, Text, DateTime
from sqlalchemy.sql import func

from app.core.database import Base


class Token(Base):
    __tablename__ = "tokens"

    id = Column(Integer, primary_key=True, autoincrement=True)

    integration_id = Column(Integer, nullable=False, index=True)

    # Ciphertext
    access_token = Column(Text, nullable=False)
    refresh_token = Column(Text, nullable=False)

    expires_at = Column(DateTime(timezone=True), nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
    deleted_at = Column(DateTime(timezone=True), nullable=True, index=True)

    def __repr__(self):
        return f"<Token(id={self.id}, integration_id={self.integration_id})>"

    def is_deleted(self) -> bool:
        return self.deleted_at is not None

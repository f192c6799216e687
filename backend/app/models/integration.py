"""
OAuth integration descriptor model.

client_secret holds ciphertext; the integration store seals it on write and
opens it on read.
"""

from sqlalchemy import Column, Integer, String, Text, DateTime
from sqlalchemy.sql import func

from app.core.database import Base


AUTH_TYPES = ("client_credentials", "authorization_code")


class Integration(Base):
    __tablename__ = "integrations"

    id = Column(Integer, primary_key=True, autoincrement=True)

    name = Column(String(255), unique=True, nullable=False)
    auth_type = Column(String(32), nullable=False)
    client_id = Column(String(255), nullable=False)
    client_secret = Column(Text, nullable=False)
    token_url = Column(String(2048), nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    def __repr__(self):
        return f"<Integration(id={self.id}, name='{self.name}', auth_type='{self.auth_type}')>"

"""
User-related database models.
"""

from datetime import datetime, timezone
from sqlalchemy import Column, Integer, String, DateTime

from app.core.database import Base


USER_ROLES = ("admin", "user")


class User(Base):
    """User model for authentication and authorization."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)

    username = Column(String(32), unique=True, nullable=False, index=True)

    # bcrypt hash, salt and cost encoded in the value
    hashed_password = Column(String(128), nullable=False)

    role = Column(String(20), nullable=False, default="user")  # admin, user

    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))

    def __repr__(self):
        return f"<User(id={self.id}, username='{self.username}', role='{self.role}')>"

    def is_admin(self) -> bool:
        """Check if user is admin."""
        return self.role == "admin"

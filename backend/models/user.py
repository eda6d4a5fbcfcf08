"""User model definitions."""

import enum
import uuid

from sqlalchemy import Column, DateTime, String
from backend.database import Base, utcnow


class UserRole(str, enum.Enum):
    LEARNER = "learner"
    ADMIN = "admin"


class User(Base):
    """Represents an application user."""
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    email = Column(String, unique=True, index=True, nullable=False)
    name = Column(String, nullable=False, default="")
    role = Column(String, nullable=False, default=UserRole.LEARNER.value)  # learner/admin
    password_hash = Column(String, nullable=False)
    salt = Column(String, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

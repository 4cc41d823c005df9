"""User model."""

import uuid

from sqlalchemy import Column, DateTime, String

from app.database import Base, utcnow


def _new_user_id() -> str:
    return str(uuid.uuid4())


class User(Base):
    """Application user."""

    __tablename__ = "user"

    id = Column(String(36), primary_key=True, default=_new_user_id)
    email = Column(String(256), unique=True, nullable=False, index=True)
    password_hash = Column(String(256), nullable=False)
    name = Column(String(100), nullable=False)
    created_at = Column(DateTime, nullable=False, default=utcnow)

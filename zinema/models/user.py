"""User model."""

import uuid

from sqlalchemy import Column, DateTime, Integer, String

from zinema.database import Base, utcnow


def _new_user_id() -> str:
    return uuid.uuid4().hex


class User(Base):
    """Registered Zinema account."""

    __tablename__ = "user"

    id = Column(String(32), primary_key=True, default=_new_user_id)
    first_name = Column(String(128), nullable=False)
    last_name = Column(String(128), nullable=False)
    age = Column(Integer, nullable=False)
    email = Column(String(256), unique=True, nullable=False, index=True)
    password_hash = Column(String(256), nullable=False)
    reset_password_token = Column(String(128), nullable=True, index=True)
    reset_password_expires_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email})>"

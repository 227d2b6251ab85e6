"""Credential store: persistence of user records and reset-token state."""

import logging
from datetime import datetime
from typing import Any

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from zinema.database import utcnow
from zinema.exceptions import DuplicateEmail, ValidationError
from zinema.models.user import User
from zinema.validators import is_valid_email

logger = logging.getLogger("zinema")

MIN_AGE = 13
UPDATABLE_FIELDS = ("first_name", "last_name", "age", "email", "password_hash")


def _clean_name(field: str, value: Any) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{field} is required")
    return value.strip()


def _clean_age(value: Any) -> int:
    if value is None or isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError("age is required and must be a whole number")
    if value < MIN_AGE:
        raise ValidationError(f"age must be at least {MIN_AGE}")
    return value


def _clean_email(value: Any) -> str:
    if not isinstance(value, str) or not value:
        raise ValidationError("email is required")
    if not is_valid_email(value):
        raise ValidationError("Invalid email format")
    return value


_CLEANERS = {
    "first_name": lambda v: _clean_name("firstName", v),
    "last_name": lambda v: _clean_name("lastName", v),
    "age": _clean_age,
    "email": _clean_email,
}


class UserStore:
    """Data access for ``User`` rows.

    Every method takes the caller's session and commits its own writes.
    """

    def create(
        self,
        db: Session,
        first_name: Any,
        last_name: Any,
        age: Any,
        email: Any,
        password_hash: str,
    ) -> User:
        """Insert a new user. Raises ValidationError or DuplicateEmail."""
        user = User(
            first_name=_clean_name("firstName", first_name),
            last_name=_clean_name("lastName", last_name),
            age=_clean_age(age),
            email=_clean_email(email),
            password_hash=password_hash,
        )
        if self.find_by_email(db, user.email):
            raise DuplicateEmail()

        db.add(user)
        self._commit_unique(db)
        db.refresh(user)
        return user

    def find_by_email(self, db: Session, email: str) -> User | None:
        return db.query(User).filter(User.email == email).first()

    def find_by_id(self, db: Session, user_id: str) -> User | None:
        return db.query(User).filter(User.id == user_id).first()

    def update(self, db: Session, user_id: str, fields: dict[str, Any]) -> User | None:
        """Apply profile changes. Unknown keys are ignored, changed keys re-validated."""
        user = self.find_by_id(db, user_id)
        if not user:
            return None

        changes = {k: v for k, v in fields.items() if k in UPDATABLE_FIELDS}
        for key, value in changes.items():
            cleaner = _CLEANERS.get(key)
            changes[key] = cleaner(value) if cleaner else value

        new_email = changes.get("email")
        if new_email and new_email != user.email:
            other = self.find_by_email(db, new_email)
            if other and other.id != user.id:
                raise DuplicateEmail()

        for key, value in changes.items():
            setattr(user, key, value)
        self._commit_unique(db)
        db.refresh(user)
        return user

    def delete(self, db: Session, user_id: str) -> User | None:
        user = self.find_by_id(db, user_id)
        if not user:
            return None
        db.delete(user)
        db.commit()
        return user

    def set_reset_token(self, db: Session, email: str, token: str, expires_at: datetime) -> bool:
        """Store a reset token for the account, replacing any previous one.

        Returns whether an account matched. Concurrent calls are last-write-wins.
        """
        result = db.execute(
            update(User)
            .where(User.email == email)
            .values(reset_password_token=token, reset_password_expires_at=expires_at, updated_at=utcnow())
            .execution_options(synchronize_session=False)
        )
        db.commit()
        return result.rowcount > 0

    def find_by_reset_token(self, db: Session, token: str, now: datetime) -> User | None:
        """Find the account holding ``token``. Tokens expiring at or before ``now`` never match."""
        return (
            db.query(User)
            .filter(User.reset_password_token == token, User.reset_password_expires_at > now)
            .first()
        )

    def clear_reset_token(self, db: Session, user_id: str) -> None:
        db.execute(
            update(User)
            .where(User.id == user_id)
            .values(reset_password_token=None, reset_password_expires_at=None, updated_at=utcnow())
            .execution_options(synchronize_session=False)
        )
        db.commit()

    def consume_reset_token(self, db: Session, user_id: str, token: str, password_hash: str, now: datetime) -> bool:
        """Replace the password and clear the reset token in one conditional UPDATE.

        The row only matches while it still holds ``token`` unexpired, so of any
        number of concurrent redemptions at most one returns True.
        """
        result = db.execute(
            update(User)
            .where(
                User.id == user_id,
                User.reset_password_token == token,
                User.reset_password_expires_at > now,
            )
            .values(
                password_hash=password_hash,
                reset_password_token=None,
                reset_password_expires_at=None,
                updated_at=utcnow(),
            )
            .execution_options(synchronize_session=False)
        )
        db.commit()
        return result.rowcount == 1

    def _commit_unique(self, db: Session) -> None:
        try:
            db.commit()
        except IntegrityError as e:
            db.rollback()
            logger.info("Unique constraint rejected write: %s", e.orig)
            raise DuplicateEmail() from e


_user_store: UserStore | None = None


def get_user_store() -> UserStore:
    """Get singleton user store instance."""
    global _user_store
    if _user_store is None:
        _user_store = UserStore()
    return _user_store

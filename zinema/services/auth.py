"""Account service: registration, login and profile management."""

import logging
from typing import Any

from sqlalchemy.orm import Session

from zinema.exceptions import BadRequest, InvalidCredentials, NotFound, PasswordMismatch, WeakPassword
from zinema.models.user import User
from zinema.services.jwt import JWTService
from zinema.services.passwords import PasswordHasher
from zinema.services.user_store import UserStore
from zinema.validators import is_strong_password, is_valid_email

logger = logging.getLogger("zinema")


class AuthService:
    """Handles user registration, authentication and profile changes."""

    def __init__(self, store: UserStore, hasher: PasswordHasher, jwt_service: JWTService) -> None:
        self.store = store
        self.hasher = hasher
        self.jwt_service = jwt_service

    def register(
        self,
        db: Session,
        first_name: Any,
        last_name: Any,
        age: Any,
        email: str | None,
        password: str | None,
        confirm_password: str | None,
    ) -> User:
        """Register a new user and return it."""
        if not email or not password or not confirm_password:
            raise BadRequest("All fields are required")
        if not is_valid_email(email):
            raise BadRequest("Invalid email format")
        if not is_strong_password(password):
            raise WeakPassword()
        if password != confirm_password:
            raise PasswordMismatch()

        user = self.store.create(
            db,
            first_name=first_name,
            last_name=last_name,
            age=age,
            email=email,
            password_hash=self.hasher.hash(password),
        )
        logger.info("Registered user %s", user.id)
        return user

    def authenticate(self, db: Session, email: str | None, password: str | None) -> str:
        """Check credentials and return a session token."""
        if not email or not password:
            raise BadRequest("All fields are required")

        user = self.store.find_by_email(db, email)
        if not user or not self.hasher.verify(password, user.password_hash):
            raise InvalidCredentials()

        return self.jwt_service.issue(user_id=user.id, email=user.email)

    def get_profile(self, db: Session, user_id: str) -> User:
        user = self.store.find_by_id(db, user_id)
        if not user:
            raise NotFound("User not found")
        return user

    def update_profile(
        self,
        db: Session,
        user_id: str,
        changes: dict[str, Any],
        password: str | None = None,
        confirm_password: str | None = None,
    ) -> User:
        """Apply profile changes; a new password must be confirmed and meet the policy."""
        if not self.store.find_by_id(db, user_id):
            raise NotFound("User not found")

        fields = dict(changes)
        if password:
            if password != confirm_password:
                raise PasswordMismatch()
            if not is_strong_password(password):
                raise WeakPassword("Password does not meet complexity requirements")
            fields["password_hash"] = self.hasher.hash(password)

        user = self.store.update(db, user_id, fields)
        if not user:
            raise NotFound("User not found")
        return user

    def delete_account(self, db: Session, user_id: str) -> None:
        if not self.store.delete(db, user_id):
            raise NotFound("User not found")
        logger.info("Deleted user %s", user_id)

"""Password recovery: reset requests and token redemption."""

import logging
from collections.abc import Callable
from datetime import datetime
from urllib.parse import urlencode

from sqlalchemy.orm import Session

from zinema.database import utcnow
from zinema.exceptions import (
    RESET_PASSWORD_POLICY_MESSAGE,
    BadRequest,
    InvalidOrExpiredToken,
    NotificationError,
    PasswordMismatch,
    WeakPassword,
)
from zinema.services.notifier import Notifier
from zinema.services.passwords import PasswordHasher
from zinema.services.tokens import ResetTokenGenerator
from zinema.services.user_store import UserStore
from zinema.validators import is_strong_password, is_valid_email

logger = logging.getLogger("zinema")

RESET_REQUESTED_MESSAGE = "If the email exists, a password reset link has been sent"
RESET_COMPLETED_MESSAGE = "Password has been reset successfully"


class RecoveryService:
    """Coordinates a password reset cycle.

    Request phase: issue a token for the account and email a link carrying it.
    Redemption phase: exchange a live token for a new password, which also
    invalidates the token.
    """

    def __init__(
        self,
        store: UserStore,
        hasher: PasswordHasher,
        tokens: ResetTokenGenerator,
        notifier: Notifier,
        frontend_url: str,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self.store = store
        self.hasher = hasher
        self.tokens = tokens
        self.notifier = notifier
        self.frontend_url = frontend_url.rstrip("/")
        self.clock = clock

    def build_reset_link(self, token: str) -> str:
        return f"{self.frontend_url}/password-reset?{urlencode({'token': token})}"

    def request_reset(self, db: Session, email: str | None) -> None:
        """Issue a reset token and email it if the account exists.

        Returns the same way whether or not the account exists; the caller
        must answer with RESET_REQUESTED_MESSAGE in both cases.
        """
        if not email:
            raise BadRequest("Email is required")
        if not is_valid_email(email):
            raise BadRequest("Invalid email format")

        user = self.store.find_by_email(db, email)
        if not user:
            logger.info("Password reset requested for unknown email")
            return

        token = self.tokens.generate()
        expires_at = self.tokens.expiry_from(self.clock())
        self.store.set_reset_token(db, user.email, token, expires_at)

        try:
            self.notifier.send_recovery_email(user.email, self.build_reset_link(token))
        except NotificationError as e:
            logger.error("Password reset email to user %s failed: %s", user.id, e.message)
            raise
        except Exception as e:
            logger.error("Password reset email to user %s failed: %s", user.id, e)
            raise NotificationError(f"Password reset email failed: {e}") from e

        logger.info("Password reset link issued for user %s", user.id)

    def reset_password(
        self,
        db: Session,
        token: str | None,
        password: str | None,
        confirm_password: str | None,
    ) -> None:
        """Replace the password of the account holding ``token`` and consume the token."""
        if not token or not password or not confirm_password:
            raise BadRequest("Token, password and confirmation are required")
        if not is_strong_password(password):
            raise WeakPassword(RESET_PASSWORD_POLICY_MESSAGE)
        if password != confirm_password:
            raise PasswordMismatch()

        user = self.store.find_by_reset_token(db, token, self.clock())
        if not user:
            raise InvalidOrExpiredToken()

        password_hash = self.hasher.hash(password)
        if not self.store.consume_reset_token(db, user.id, token, password_hash, self.clock()):
            # Another redemption won, or the token expired while hashing.
            raise InvalidOrExpiredToken()

        logger.info("Password reset completed for user %s", user.id)

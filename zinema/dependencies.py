"""FastAPI dependencies: service wiring and bearer authentication."""

from dataclasses import dataclass

from fastapi import Depends, Request

from zinema.config import get_settings
from zinema.services.auth import AuthService
from zinema.services.jwt import JWTService, get_jwt_service
from zinema.services.notifier import Notifier, get_notifier
from zinema.services.passwords import PasswordHasher, get_password_hasher
from zinema.services.recovery import RecoveryService
from zinema.services.tokens import ResetTokenGenerator, get_reset_token_generator
from zinema.services.user_store import UserStore, get_user_store


@dataclass
class CurrentUser:
    """Authenticated user context."""

    user_id: str
    email: str


def bearer_token(request: Request) -> str | None:
    """Return the token from an ``Authorization: Bearer <token>`` header, if any."""
    auth_header = request.headers.get("Authorization")
    if not auth_header:
        return None
    scheme, _, token = auth_header.partition(" ")
    if scheme.lower() != "bearer":
        return None
    return token.strip() or None


def get_current_user(
    request: Request,
    jwt_service: JWTService = Depends(get_jwt_service),
) -> CurrentUser:
    """Validate the bearer token. Raises Unauthenticated (401) or InvalidToken (403)."""
    claims = jwt_service.verify(bearer_token(request))
    return CurrentUser(user_id=claims.id, email=claims.email)


def get_auth_service(
    store: UserStore = Depends(get_user_store),
    hasher: PasswordHasher = Depends(get_password_hasher),
    jwt_service: JWTService = Depends(get_jwt_service),
) -> AuthService:
    return AuthService(store=store, hasher=hasher, jwt_service=jwt_service)


def get_recovery_service(
    store: UserStore = Depends(get_user_store),
    hasher: PasswordHasher = Depends(get_password_hasher),
    tokens: ResetTokenGenerator = Depends(get_reset_token_generator),
    notifier: Notifier = Depends(get_notifier),
) -> RecoveryService:
    return RecoveryService(
        store=store,
        hasher=hasher,
        tokens=tokens,
        notifier=notifier,
        frontend_url=get_settings().FRONTEND_URL,
    )

"""JWT session token service."""

from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt

from zinema.config import get_settings
from zinema.database import utcnow
from zinema.exceptions import ConfigurationError, InvalidToken, Unauthenticated


@dataclass(frozen=True)
class SessionClaims:
    """Identity carried by a verified session token."""

    id: str
    email: str


def _timestamp(moment: datetime) -> int:
    return int(moment.replace(tzinfo=timezone.utc).timestamp())


class JWTService:
    """Signs and verifies stateless bearer session tokens.

    Expiry is checked here against ``clock`` instead of inside ``jwt.decode``
    so that a token issued at T is valid on [T, T + expiry) and the boundary
    can be exercised with a fixed clock.
    """

    def __init__(
        self,
        secret_key: str,
        algorithm: str = "HS256",
        expire_minutes: int = 120,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        if not secret_key:
            raise ConfigurationError("JWT_SECRET_KEY is not configured")
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.expire_minutes = expire_minutes
        self.clock = clock

    def issue(self, user_id: str, email: str) -> str:
        """Create a signed token for the given user."""
        issued_at = _timestamp(self.clock())
        payload = {
            "id": user_id,
            "email": email,
            "iat": issued_at,
            "exp": issued_at + int(timedelta(minutes=self.expire_minutes).total_seconds()),
        }
        return jwt.encode(payload, self.secret_key, algorithm=self.algorithm)

    def verify(self, token: str | None) -> SessionClaims:
        """Validate a token and return its claims.

        Raises Unauthenticated when no token is given and InvalidToken when the
        signature, expiry or payload shape is wrong.
        """
        if not token:
            raise Unauthenticated()

        try:
            payload = jwt.decode(
                token,
                self.secret_key,
                algorithms=[self.algorithm],
                options={"verify_exp": False},
            )
        except JWTError:
            raise InvalidToken() from None

        expires_at = payload.get("exp")
        if not isinstance(expires_at, (int, float)) or _timestamp(self.clock()) >= expires_at:
            raise InvalidToken()

        user_id = payload.get("id")
        email = payload.get("email")
        if not user_id or not email:
            raise InvalidToken("Malformed token payload")

        return SessionClaims(id=str(user_id), email=str(email))


_jwt_service: JWTService | None = None


def get_jwt_service() -> JWTService:
    """Get singleton JWT service instance."""
    global _jwt_service
    if _jwt_service is None:
        settings = get_settings()
        _jwt_service = JWTService(
            secret_key=settings.JWT_SECRET_KEY,
            algorithm=settings.JWT_ALGORITHM,
            expire_minutes=settings.JWT_EXPIRE_MINUTES,
        )
    return _jwt_service

"""Password reset token generation."""

import secrets
from datetime import datetime, timedelta

TOKEN_BYTES = 32
RESET_TOKEN_TTL = timedelta(hours=1)
# How the recovery email states RESET_TOKEN_TTL.
RESET_TOKEN_TTL_TEXT = "1 hour"


class ResetTokenGenerator:
    """Produces opaque single-use reset tokens and their expiry instants.

    Tokens are 64 hex characters drawn from ``secrets``; nothing ever decodes
    them, they are matched by equality against the stored value. Every token
    lives for exactly RESET_TOKEN_TTL.
    """

    ttl = RESET_TOKEN_TTL

    def generate(self) -> str:
        return secrets.token_hex(TOKEN_BYTES)

    def expiry_from(self, now: datetime) -> datetime:
        return now + self.ttl


_reset_token_generator: ResetTokenGenerator | None = None


def get_reset_token_generator() -> ResetTokenGenerator:
    """Get singleton reset token generator instance."""
    global _reset_token_generator
    if _reset_token_generator is None:
        _reset_token_generator = ResetTokenGenerator()
    return _reset_token_generator

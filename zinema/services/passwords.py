"""Password hashing with bcrypt."""

import bcrypt

from zinema.exceptions import HashingError

SALT_ROUNDS = 10


class PasswordHasher:
    """Salted one-way hashing and verification of passwords."""

    def __init__(self, rounds: int = SALT_ROUNDS) -> None:
        self.rounds = rounds

    def hash(self, plaintext: str) -> str:
        """Hash a password. Raises HashingError if bcrypt rejects the input."""
        try:
            return bcrypt.hashpw(plaintext.encode("utf-8"), bcrypt.gensalt(rounds=self.rounds)).decode("utf-8")
        except (TypeError, ValueError) as e:
            raise HashingError(f"Password hashing failed: {e}") from e

    def verify(self, plaintext: str, password_hash: str) -> bool:
        """Check a password against a stored hash. Malformed hashes never match."""
        try:
            return bcrypt.checkpw(plaintext.encode("utf-8"), password_hash.encode("utf-8"))
        except (TypeError, ValueError):
            return False


_password_hasher: PasswordHasher | None = None


def get_password_hasher() -> PasswordHasher:
    """Get singleton password hasher instance."""
    global _password_hasher
    if _password_hasher is None:
        _password_hasher = PasswordHasher()
    return _password_hasher

"""Input predicates for emails and passwords.

Written as explicit character-class checks rather than regular expressions.
"""

import string

MIN_PASSWORD_LENGTH = 8
# bcrypt only accepts this many bytes of input.
MAX_PASSWORD_BYTES = 72

_ASCII_LOWER = frozenset(string.ascii_lowercase)
_ASCII_UPPER = frozenset(string.ascii_uppercase)
_ASCII_DIGITS = frozenset(string.digits)
_ASCII_ALNUM = _ASCII_LOWER | _ASCII_UPPER | _ASCII_DIGITS


def is_valid_email(value: str | None) -> bool:
    """Check the basic ``local@domain.tld`` shape.

    Rules:
      - no whitespace anywhere
      - exactly one ``@``
      - a non-empty local part before the ``@``
      - a domain containing a ``.`` with at least one character on each side
    """
    if not value or any(ch.isspace() for ch in value):
        return False
    if value.count("@") != 1:
        return False
    local, domain = value.split("@")
    if not local:
        return False
    return "." in domain[1:-1]


def is_symbol(ch: str) -> bool:
    """Anything that is not an ASCII letter or digit counts, underscore included."""
    return ch not in _ASCII_ALNUM


def is_strong_password(value: str | None) -> bool:
    """Check the password policy.

    At least eight characters and at most 72 UTF-8 bytes, with one ASCII
    lowercase letter, one ASCII uppercase letter, one ASCII digit and one
    symbol (see ``is_symbol``).
    """
    if not value or len(value) < MIN_PASSWORD_LENGTH:
        return False
    if len(value.encode("utf-8")) > MAX_PASSWORD_BYTES:
        return False
    has_lower = any(ch in _ASCII_LOWER for ch in value)
    has_upper = any(ch in _ASCII_UPPER for ch in value)
    has_digit = any(ch in _ASCII_DIGITS for ch in value)
    has_symbol = any(is_symbol(ch) for ch in value)
    return has_lower and has_upper and has_digit and has_symbol

"""Password hashing and verification using bcrypt."""

from __future__ import annotations

import bcrypt

from hirescreen.config import BCRYPT_ROUNDS

# bcrypt only reads the first 72 bytes of its input.
MAX_PASSWORD_BYTES = 72


def password_fits(password: str) -> bool:
    return len(password.encode("utf-8")) <= MAX_PASSWORD_BYTES


def hash_password(password: str, rounds: int = BCRYPT_ROUNDS) -> str:
    """Hash a plaintext password with bcrypt. Returns a utf-8 string.

    Raises ``ValueError`` for passwords longer than ``MAX_PASSWORD_BYTES``.
    """
    if not password_fits(password):
        raise ValueError(f"password is longer than {MAX_PASSWORD_BYTES} bytes")
    salt = bcrypt.gensalt(rounds=rounds)
    hashed = bcrypt.hashpw(password.encode("utf-8"), salt)
    return hashed.decode("utf-8")


def verify_password(password: str, hashed: str) -> bool:
    """Return True if password matches the stored bcrypt hash.

    A malformed stored hash, or a password too long to have been hashed,
    counts as a mismatch.
    """
    if not password_fits(password):
        return False
    try:
        return bcrypt.checkpw(password.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        return False

"""Password hashing with bcrypt (auto-salted, configurable work factor)."""

from typing import Protocol

import bcrypt

# bcrypt ignores everything past the first 72 bytes of input.
MAX_PASSWORD_BYTES = 72


class CredentialHasher(Protocol):
    """One-way password hashing interface."""

    def hash(self, plaintext: str) -> str: ...
    def verify(self, hashed: str, plaintext: str) -> bool: ...


class BcryptHasher:
    def __init__(self, rounds: int = 12) -> None:
        self._rounds = rounds

    def hash(self, plaintext: str) -> str:
        return bcrypt.hashpw(plaintext.encode(), bcrypt.gensalt(rounds=self._rounds)).decode()

    def verify(self, hashed: str, plaintext: str) -> bool:
        """Constant-time comparison against a bcrypt hash. Malformed input is a mismatch."""
        try:
            return bcrypt.checkpw(plaintext.encode(), hashed.encode())
        except (ValueError, TypeError):
            return False

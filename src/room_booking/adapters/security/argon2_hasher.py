from argon2 import PasswordHasher as _Argon2, Type
from argon2.exceptions import InvalidHash, VerificationError, VerifyMismatchError

from ...domain.ports import PasswordHasher


class Argon2PasswordHasher(PasswordHasher):
    """argon2id hashing via argon2-cffi."""

    def __init__(self, hasher: _Argon2 | None = None) -> None:
        self._hasher = hasher or _Argon2(type=Type.ID)

    def hash(self, password: str) -> str:
        return self._hasher.hash(password)

    def verify(self, password_hash: str, password: str) -> bool:
        try:
            return self._hasher.verify(password_hash, password)
        except (InvalidHash, VerifyMismatchError, VerificationError):
            return False

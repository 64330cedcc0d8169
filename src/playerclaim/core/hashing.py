from __future__ import annotations

from passlib.context import CryptContext

DEFAULT_ROUNDS = 12


class NationalIdHasher:
    """One-way, salted bcrypt hashing for national identity numbers.

    Only the hash leaves this class; callers never persist the input.
    """

    def __init__(self, rounds: int = DEFAULT_ROUNDS) -> None:
        self.rounds = rounds
        self._context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=rounds)

    def hash(self, national_id: str) -> str:
        return self._context.hash(national_id)

    def matches(self, national_id: str, hashed: str) -> bool:
        return self._context.verify(national_id, hashed)


def looks_like_bcrypt(value: str) -> bool:
    return value.startswith(("$2a$", "$2b$", "$2y$")) and len(value) == 60

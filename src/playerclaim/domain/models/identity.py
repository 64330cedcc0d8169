from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class DeclaredIdentity:
    """Identity fields as typed by the user. The national id is never persisted."""

    national_id: str
    first_name: str
    last_name: str
    birth_year: int

    def __repr__(self) -> str:
        return (
            f"DeclaredIdentity(national_id='***', first_name={self.first_name!r}, "
            f"last_name={self.last_name!r}, birth_year={self.birth_year!r})"
        )


@dataclass(slots=True)
class IdentityVerificationRecord:
    id: str
    user_id: str
    national_id_hash: str
    first_name: str
    last_name: str
    birth_year: int
    verified: bool
    created_at: str

from __future__ import annotations

from dataclasses import dataclass

ROLE_FREE = "free"
ROLE_PREMIUM = "premium"
ROLE_ADMIN = "admin"
ROLES = (ROLE_FREE, ROLE_PREMIUM, ROLE_ADMIN)

VERIFICATION_NONE = "none"
VERIFICATION_PENDING_IDENTITY = "pending_identity"
VERIFICATION_PENDING_ADMIN_REVIEW = "pending_admin_review"
VERIFICATION_APPROVED = "approved"
VERIFICATION_REJECTED = "rejected"
VERIFICATION_STATUSES = (
    VERIFICATION_NONE,
    VERIFICATION_PENDING_IDENTITY,
    VERIFICATION_PENDING_ADMIN_REVIEW,
    VERIFICATION_APPROVED,
    VERIFICATION_REJECTED,
)


@dataclass(slots=True)
class User:
    id: str
    email: str
    role: str
    verification_status: str
    claim_attempts: int
    claimed_player_id: str | None
    created_at: str


@dataclass(slots=True)
class Player:
    id: str
    first_name: str
    last_name: str
    birth_year: int | None
    club: str | None
    league: str | None
    position: str | None
    is_claimed: bool
    claimed_by_id: str | None
    created_at: str

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

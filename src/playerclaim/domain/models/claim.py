from __future__ import annotations

from dataclasses import dataclass

CLAIM_PENDING_IDENTITY = "pending_identity"
CLAIM_PENDING_ADMIN_REVIEW = "pending_admin_review"
CLAIM_APPROVED = "approved"
CLAIM_REJECTED = "rejected"

CLAIM_STATUSES = (
    CLAIM_PENDING_IDENTITY,
    CLAIM_PENDING_ADMIN_REVIEW,
    CLAIM_APPROVED,
    CLAIM_REJECTED,
)
ACTIVE_CLAIM_STATUSES = (CLAIM_PENDING_IDENTITY, CLAIM_PENDING_ADMIN_REVIEW)

MAX_CLAIM_ATTEMPTS = 3


@dataclass(slots=True)
class ClaimRequest:
    id: str
    user_id: str
    player_id: str
    status: str
    review_rationale: str | None
    created_at: str
    reviewed_at: str | None

    @property
    def is_active(self) -> bool:
        return self.status in ACTIVE_CLAIM_STATUSES

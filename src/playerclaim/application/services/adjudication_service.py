from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from playerclaim.application.services.audit_service import AuditService
from playerclaim.core.errors import ConflictError, InternalError, NotFoundError
from playerclaim.core.time import now_utc_iso
from playerclaim.domain.models.audit import ACTION_CLAIM_APPROVED, ACTION_CLAIM_REJECTED
from playerclaim.domain.models.claim import (
    CLAIM_APPROVED,
    CLAIM_PENDING_ADMIN_REVIEW,
    CLAIM_REJECTED,
)
from playerclaim.domain.models.directory import VERIFICATION_REJECTED
from playerclaim.infrastructure.db.repos.claim_repo import ClaimRepo
from playerclaim.infrastructure.db.repos.identity_repo import IdentityRepo
from playerclaim.infrastructure.db.repos.player_repo import PlayerRepo
from playerclaim.infrastructure.db.repos.user_repo import UserRepo
from playerclaim.infrastructure.db.sqlite import transaction

logger = logging.getLogger(__name__)

TARGET_CLAIM_REQUEST = "ClaimRequest"


@dataclass(slots=True)
class ReviewIdentity:
    first_name: str
    last_name: str
    birth_year: int
    verified: bool
    submitted_at: str


@dataclass(slots=True)
class ReviewPlayer:
    id: str
    first_name: str
    last_name: str
    birth_year: int | None
    club: str | None
    position: str | None
    league: str | None


@dataclass(slots=True)
class PendingReview:
    claim_id: str
    created_at: str
    user_id: str
    user_email: str | None
    user_verification_status: str | None
    identity: ReviewIdentity | None
    player: ReviewPlayer | None


@dataclass(slots=True)
class AdjudicationResult:
    claim_id: str
    status: str
    reviewed_at: str
    audit_entry_id: str


class AdjudicationService:
    """Admin review queue and the approve/reject transitions."""

    def __init__(
        self,
        db_path: Path,
        claim_repo: ClaimRepo,
        user_repo: UserRepo,
        player_repo: PlayerRepo,
        identity_repo: IdentityRepo,
        audit_service: AuditService,
    ) -> None:
        self.db_path = db_path
        self.claim_repo = claim_repo
        self.user_repo = user_repo
        self.player_repo = player_repo
        self.identity_repo = identity_repo
        self.audit_service = audit_service

    def list_pending_reviews(self) -> list[PendingReview]:
        reviews: list[PendingReview] = []
        for claim in self.claim_repo.list_by_status(CLAIM_PENDING_ADMIN_REVIEW):
            user = self.user_repo.get(claim.user_id)
            latest = self.identity_repo.get_latest_for_user(claim.user_id)
            player = self.player_repo.get(claim.player_id)
            reviews.append(
                PendingReview(
                    claim_id=claim.id,
                    created_at=claim.created_at,
                    user_id=claim.user_id,
                    user_email=user.email if user else None,
                    user_verification_status=user.verification_status if user else None,
                    identity=(
                        ReviewIdentity(
                            first_name=latest.first_name,
                            last_name=latest.last_name,
                            birth_year=latest.birth_year,
                            verified=latest.verified,
                            submitted_at=latest.created_at,
                        )
                        if latest
                        else None
                    ),
                    player=(
                        ReviewPlayer(
                            id=player.id,
                            first_name=player.first_name,
                            last_name=player.last_name,
                            birth_year=player.birth_year,
                            club=player.club,
                            position=player.position,
                            league=player.league,
                        )
                        if player
                        else None
                    ),
                )
            )
        return reviews

    def approve(self, claim_id: str, admin_id: str) -> AdjudicationResult:
        reviewed_at = now_utc_iso()
        with transaction(self.db_path) as conn:
            claim = self.claim_repo.get(claim_id, conn=conn)
            if claim is None:
                raise NotFoundError(f"Claim not found: {claim_id}")
            if claim.status != CLAIM_PENDING_ADMIN_REVIEW:
                raise ConflictError("This claim has already been processed.")
            player = self.player_repo.get(claim.player_id, conn=conn)
            if player is None:
                raise NotFoundError(f"Player not found: {claim.player_id}")
            if player.is_claimed:
                raise ConflictError("This player profile has already been claimed by someone else.")

            if (
                self.claim_repo.transition_status(
                    conn,
                    claim_id,
                    from_status=CLAIM_PENDING_ADMIN_REVIEW,
                    to_status=CLAIM_APPROVED,
                    reviewed_at=reviewed_at,
                )
                != 1
            ):
                raise ConflictError("This claim has already been processed.")
            if self.player_repo.mark_claimed(conn, claim.player_id, claim.user_id) != 1:
                raise ConflictError("This player profile has already been claimed by someone else.")
            if self.user_repo.assign_claimed_player(conn, claim.user_id, claim.player_id) != 1:
                raise InternalError(f"Claimant no longer exists: {claim.user_id}")
            entry = self.audit_service.record(
                conn,
                admin_id=admin_id,
                action=ACTION_CLAIM_APPROVED,
                target_type=TARGET_CLAIM_REQUEST,
                target_id=claim_id,
                meta={"player_id": claim.player_id, "user_id": claim.user_id},
            )

        logger.info("Claim %s approved by admin %s", claim_id, admin_id)
        return AdjudicationResult(
            claim_id=claim_id,
            status=CLAIM_APPROVED,
            reviewed_at=reviewed_at,
            audit_entry_id=entry.id,
        )

    def reject(self, claim_id: str, admin_id: str, rationale: str | None = None) -> AdjudicationResult:
        """Reject a reviewed claim. The spent attempt is not refunded."""
        rationale = (rationale or "").strip() or None
        reviewed_at = now_utc_iso()
        with transaction(self.db_path) as conn:
            claim = self.claim_repo.get(claim_id, conn=conn)
            if claim is None:
                raise NotFoundError(f"Claim not found: {claim_id}")
            if claim.status != CLAIM_PENDING_ADMIN_REVIEW:
                raise ConflictError("This claim has already been processed.")

            if (
                self.claim_repo.transition_status(
                    conn,
                    claim_id,
                    from_status=CLAIM_PENDING_ADMIN_REVIEW,
                    to_status=CLAIM_REJECTED,
                    reviewed_at=reviewed_at,
                    review_rationale=rationale,
                )
                != 1
            ):
                raise ConflictError("This claim has already been processed.")
            self.user_repo.set_verification_status(conn, claim.user_id, VERIFICATION_REJECTED)
            entry = self.audit_service.record(
                conn,
                admin_id=admin_id,
                action=ACTION_CLAIM_REJECTED,
                target_type=TARGET_CLAIM_REQUEST,
                target_id=claim_id,
                meta={"reason": rationale, "user_id": claim.user_id},
            )

        logger.info("Claim %s rejected by admin %s", claim_id, admin_id)
        return AdjudicationResult(
            claim_id=claim_id,
            status=CLAIM_REJECTED,
            reviewed_at=reviewed_at,
            audit_entry_id=entry.id,
        )

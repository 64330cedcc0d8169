from __future__ import annotations

import logging
import sqlite3
from dataclasses import dataclass
from pathlib import Path

from playerclaim.core.errors import (
    AttemptsExhaustedError,
    ConflictError,
    ForbiddenError,
    NotFoundError,
)
from playerclaim.core.ids import new_uuid
from playerclaim.core.time import now_utc_iso
from playerclaim.domain.models.claim import (
    CLAIM_PENDING_IDENTITY,
    MAX_CLAIM_ATTEMPTS,
    ClaimRequest,
)
from playerclaim.domain.models.directory import ROLE_PREMIUM
from playerclaim.infrastructure.db.repos.claim_repo import ClaimRepo
from playerclaim.infrastructure.db.repos.player_repo import PlayerRepo
from playerclaim.infrastructure.db.repos.user_repo import UserRepo
from playerclaim.infrastructure.db.sqlite import transaction

logger = logging.getLogger(__name__)

NEXT_STEP_IDENTITY_VERIFICATION = "identity_verification"


@dataclass(slots=True)
class StartClaimResult:
    claim_request_id: str
    status: str
    next_step: str


@dataclass(slots=True)
class PlayerSummary:
    id: str
    first_name: str
    last_name: str
    club: str | None
    position: str | None


@dataclass(slots=True)
class ClaimSummary:
    claim: ClaimRequest
    player: PlayerSummary | None


class ClaimService:
    def __init__(
        self,
        db_path: Path,
        claim_repo: ClaimRepo,
        user_repo: UserRepo,
        player_repo: PlayerRepo,
    ) -> None:
        self.db_path = db_path
        self.claim_repo = claim_repo
        self.user_repo = user_repo
        self.player_repo = player_repo

    def start_claim(self, user_id: str, player_id: str) -> StartClaimResult:
        """Open a claim on `player_id` and spend one of the user's attempts.

        Eligibility is read and enforced under the write lock; the conditional
        writes decide success from their affected-row counts.
        """
        claim = ClaimRequest(
            id=new_uuid(),
            user_id=user_id,
            player_id=player_id,
            status=CLAIM_PENDING_IDENTITY,
            review_rationale=None,
            created_at=now_utc_iso(),
            reviewed_at=None,
        )

        with transaction(self.db_path) as conn:
            self._check_eligibility(conn, user_id, player_id)

            if self.user_repo.consume_claim_attempt(conn, user_id) != 1:
                self._check_eligibility(conn, user_id, player_id)
                raise ConflictError("Claim eligibility changed while the request was processed.")
            if self.claim_repo.insert_if_player_unclaimed(conn, claim) != 1:
                self._check_player(conn, player_id)
                raise ConflictError("This profile has already been claimed by another user.")

        logger.info("Claim %s started by user %s for player %s", claim.id, user_id, player_id)
        return StartClaimResult(
            claim_request_id=claim.id,
            status=claim.status,
            next_step=NEXT_STEP_IDENTITY_VERIFICATION,
        )

    def _check_eligibility(self, conn: sqlite3.Connection, user_id: str, player_id: str) -> None:
        """Raise the failure kind that currently blocks `user_id` from claiming `player_id`."""
        user = self.user_repo.get(user_id, conn=conn)
        if user is None:
            raise NotFoundError(f"User not found: {user_id}")
        if user.role != ROLE_PREMIUM:
            raise ForbiddenError("A premium membership is required to claim a player profile.")
        if user.claim_attempts >= MAX_CLAIM_ATTEMPTS:
            raise AttemptsExhaustedError(
                f"All {MAX_CLAIM_ATTEMPTS} profile claim attempts have been used."
            )
        if self.claim_repo.get_active_for_user(user_id, conn=conn) is not None:
            raise ConflictError("You already have an active profile claim. Please wait for its outcome.")
        self._check_player(conn, player_id)

    def _check_player(self, conn: sqlite3.Connection, player_id: str) -> None:
        player = self.player_repo.get(player_id, conn=conn)
        if player is None:
            raise NotFoundError(f"Player not found: {player_id}")
        if player.is_claimed:
            raise ConflictError("This profile has already been claimed by another user.")

    def get_my_claim(self, user_id: str) -> ClaimSummary | None:
        claim = self.claim_repo.get_latest_for_user(user_id)
        if claim is None:
            return None

        player = self.player_repo.get(claim.player_id)
        summary = None
        if player is not None:
            summary = PlayerSummary(
                id=player.id,
                first_name=player.first_name,
                last_name=player.last_name,
                club=player.club,
                position=player.position,
            )
        return ClaimSummary(claim=claim, player=summary)

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path

from playerclaim.core.errors import (
    ConflictError,
    InvalidInputError,
    NotFoundError,
    ValidationFailedError,
)
from playerclaim.core.hashing import NationalIdHasher
from playerclaim.core.ids import new_uuid
from playerclaim.core.time import current_year, now_utc_iso
from playerclaim.domain.models.claim import CLAIM_PENDING_ADMIN_REVIEW, CLAIM_PENDING_IDENTITY
from playerclaim.domain.models.directory import VERIFICATION_PENDING_ADMIN_REVIEW
from playerclaim.domain.models.identity import DeclaredIdentity, IdentityVerificationRecord
from playerclaim.infrastructure.db.repos.claim_repo import ClaimRepo
from playerclaim.infrastructure.db.repos.identity_repo import IdentityRepo
from playerclaim.infrastructure.db.repos.user_repo import UserRepo
from playerclaim.infrastructure.db.sqlite import transaction
from playerclaim.infrastructure.verification.adapter import VerificationProviderAdapter

logger = logging.getLogger(__name__)

_NATIONAL_ID_RE = re.compile(r"[0-9]{11}")
MIN_BIRTH_YEAR = 1940
MIN_AGE_YEARS = 16
NAME_MIN_LENGTH = 2
NAME_MAX_LENGTH = 50


@dataclass(slots=True)
class IdentityVerificationOutcome:
    claim_request_id: str
    status: str
    record_id: str


def validate_declared_identity(
    national_id: str,
    first_name: str,
    last_name: str,
    birth_year: int,
) -> DeclaredIdentity:
    national_id = (national_id or "").strip()
    if not _NATIONAL_ID_RE.fullmatch(national_id):
        raise InvalidInputError("National identity number must be exactly 11 digits.")

    names: list[str] = []
    for label, value in (("First name", first_name), ("Last name", last_name)):
        cleaned = (value or "").strip()
        if not NAME_MIN_LENGTH <= len(cleaned) <= NAME_MAX_LENGTH:
            raise InvalidInputError(
                f"{label} must be between {NAME_MIN_LENGTH} and {NAME_MAX_LENGTH} characters."
            )
        names.append(cleaned)

    if isinstance(birth_year, bool) or not isinstance(birth_year, int):
        raise InvalidInputError("Birth year must be an integer.")
    max_birth_year = current_year() - MIN_AGE_YEARS
    if not MIN_BIRTH_YEAR <= birth_year <= max_birth_year:
        raise InvalidInputError(f"Birth year must be between {MIN_BIRTH_YEAR} and {max_birth_year}.")

    return DeclaredIdentity(
        national_id=national_id,
        first_name=names[0],
        last_name=names[1],
        birth_year=birth_year,
    )


class IdentityService:
    def __init__(
        self,
        db_path: Path,
        claim_repo: ClaimRepo,
        user_repo: UserRepo,
        identity_repo: IdentityRepo,
        verifier: VerificationProviderAdapter,
        hasher: NationalIdHasher,
    ) -> None:
        self.db_path = db_path
        self.claim_repo = claim_repo
        self.user_repo = user_repo
        self.identity_repo = identity_repo
        self.verifier = verifier
        self.hasher = hasher

    def verify_identity(self, user_id: str, declared: DeclaredIdentity) -> IdentityVerificationOutcome:
        claim = self.claim_repo.get_for_user_with_status(user_id, CLAIM_PENDING_IDENTITY)
        if claim is None:
            raise NotFoundError("You have no profile claim awaiting identity verification.")

        # Blocking network call; nothing is held open across it.
        verified = self.verifier.check(declared)

        record = IdentityVerificationRecord(
            id=new_uuid(),
            user_id=user_id,
            national_id_hash=self.hasher.hash(declared.national_id),
            first_name=declared.first_name,
            last_name=declared.last_name,
            birth_year=declared.birth_year,
            verified=verified,
            created_at=now_utc_iso(),
        )
        with transaction(self.db_path) as conn:
            self.identity_repo.append(record, conn=conn)

        if not verified:
            logger.info("Identity check failed for user %s (claim %s)", user_id, claim.id)
            raise ValidationFailedError(
                "Identity verification failed. Check your details and try again."
            )

        with transaction(self.db_path) as conn:
            moved = self.claim_repo.transition_status(
                conn,
                claim.id,
                from_status=CLAIM_PENDING_IDENTITY,
                to_status=CLAIM_PENDING_ADMIN_REVIEW,
            )
            if moved != 1:
                raise ConflictError("The claim is no longer awaiting identity verification.")
            self.user_repo.set_verification_status(conn, user_id, VERIFICATION_PENDING_ADMIN_REVIEW)

        logger.info("Claim %s verified, awaiting admin review", claim.id)
        return IdentityVerificationOutcome(
            claim_request_id=claim.id,
            status=CLAIM_PENDING_ADMIN_REVIEW,
            record_id=record.id,
        )

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from playerclaim.application.services.adjudication_service import AdjudicationService
from playerclaim.application.services.admin_service import AdminService
from playerclaim.application.services.audit_service import AuditService
from playerclaim.application.services.claim_service import ClaimService
from playerclaim.application.services.directory_service import DirectoryService
from playerclaim.application.services.identity_service import IdentityService
from playerclaim.application.services.profile_service import ProfileService
from playerclaim.core.config import AppSettings
from playerclaim.core.hashing import NationalIdHasher
from playerclaim.infrastructure.db.repos.audit_repo import AuditRepo
from playerclaim.infrastructure.db.repos.claim_repo import ClaimRepo
from playerclaim.infrastructure.db.repos.identity_repo import IdentityRepo
from playerclaim.infrastructure.db.repos.player_repo import PlayerRepo
from playerclaim.infrastructure.db.repos.profile_repo import ProfileRepo
from playerclaim.infrastructure.db.repos.user_repo import UserRepo
from playerclaim.infrastructure.verification.adapter import VerificationProviderAdapter
from playerclaim.infrastructure.verification.kps_client import KpsVerificationClient, VerificationProvider


@dataclass(slots=True)
class Services:
    directory: DirectoryService
    claims: ClaimService
    identity: IdentityService
    adjudication: AdjudicationService
    admin: AdminService
    audit: AuditService
    profiles: ProfileService


def build_services(
    db_path: Path,
    settings: AppSettings,
    provider: VerificationProvider | None = None,
) -> Services:
    claim_repo = ClaimRepo(db_path)
    user_repo = UserRepo(db_path)
    player_repo = PlayerRepo(db_path)
    identity_repo = IdentityRepo(db_path)
    audit_service = AuditService(AuditRepo(db_path))

    if provider is None:
        provider = KpsVerificationClient(
            endpoint=settings.kps_endpoint,
            timeout_seconds=settings.verification_timeout_seconds,
        )
    verifier = VerificationProviderAdapter(provider, mode=settings.verification_mode)

    return Services(
        directory=DirectoryService(user_repo, player_repo),
        claims=ClaimService(db_path, claim_repo, user_repo, player_repo),
        identity=IdentityService(
            db_path,
            claim_repo=claim_repo,
            user_repo=user_repo,
            identity_repo=identity_repo,
            verifier=verifier,
            hasher=NationalIdHasher(rounds=settings.identity_hash_rounds),
        ),
        adjudication=AdjudicationService(
            db_path,
            claim_repo=claim_repo,
            user_repo=user_repo,
            player_repo=player_repo,
            identity_repo=identity_repo,
            audit_service=audit_service,
        ),
        admin=AdminService(
            db_path,
            user_repo=user_repo,
            player_repo=player_repo,
            claim_repo=claim_repo,
            audit_service=audit_service,
        ),
        audit=audit_service,
        profiles=ProfileService(user_repo, ProfileRepo(db_path)),
    )

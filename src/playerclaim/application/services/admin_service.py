from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from playerclaim.application.services.audit_service import AuditService, validate_page
from playerclaim.core.errors import InvalidInputError, NotFoundError
from playerclaim.domain.models.audit import ACTION_USER_ROLE_CHANGED
from playerclaim.domain.models.claim import CLAIM_PENDING_ADMIN_REVIEW
from playerclaim.domain.models.directory import ROLE_PREMIUM, ROLES, User
from playerclaim.infrastructure.db.repos.claim_repo import ClaimRepo
from playerclaim.infrastructure.db.repos.player_repo import PlayerRepo
from playerclaim.infrastructure.db.repos.user_repo import UserRepo
from playerclaim.infrastructure.db.sqlite import transaction

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class UserPage:
    users: list[User]
    total: int
    page: int
    limit: int


@dataclass(slots=True)
class DashboardStats:
    total_users: int
    premium_users: int
    total_players: int
    claimed_players: int
    pending_claims: int


class AdminService:
    def __init__(
        self,
        db_path: Path,
        user_repo: UserRepo,
        player_repo: PlayerRepo,
        claim_repo: ClaimRepo,
        audit_service: AuditService,
    ) -> None:
        self.db_path = db_path
        self.user_repo = user_repo
        self.player_repo = player_repo
        self.claim_repo = claim_repo
        self.audit_service = audit_service

    def list_users(self, page: int = 1, limit: int = 50, role: str | None = None) -> UserPage:
        page, limit = validate_page(page, limit)
        if role is not None and role not in ROLES:
            raise InvalidInputError(f"Unknown role: {role}")
        users = self.user_repo.list(offset=(page - 1) * limit, limit=limit, role=role)
        return UserPage(users=users, total=self.user_repo.count(role=role), page=page, limit=limit)

    def set_user_role(self, user_id: str, role: str, admin_id: str) -> User:
        if role not in ROLES:
            raise InvalidInputError(f"Unknown role: {role}")

        with transaction(self.db_path) as conn:
            user = self.user_repo.get(user_id, conn=conn)
            if user is None:
                raise NotFoundError(f"User not found: {user_id}")
            previous_role = user.role
            self.user_repo.set_role(conn, user_id, role)
            self.audit_service.record(
                conn,
                admin_id=admin_id,
                action=ACTION_USER_ROLE_CHANGED,
                target_type="User",
                target_id=user_id,
                meta={"previous_role": previous_role, "new_role": role},
            )

        logger.info("User %s role changed %s -> %s by admin %s", user_id, previous_role, role, admin_id)
        user.role = role
        return user

    def dashboard_stats(self) -> DashboardStats:
        return DashboardStats(
            total_users=self.user_repo.count(),
            premium_users=self.user_repo.count(role=ROLE_PREMIUM),
            total_players=self.player_repo.count(),
            claimed_players=self.player_repo.count(claimed=True),
            pending_claims=self.claim_repo.count_by_status(CLAIM_PENDING_ADMIN_REVIEW),
        )

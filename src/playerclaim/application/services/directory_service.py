from __future__ import annotations

import logging

from playerclaim.core.errors import ConflictError, InvalidInputError
from playerclaim.core.ids import new_uuid
from playerclaim.core.time import now_utc_iso
from playerclaim.domain.models.directory import ROLE_FREE, ROLES, VERIFICATION_NONE, Player, User
from playerclaim.infrastructure.db.repos.player_repo import PlayerRepo
from playerclaim.infrastructure.db.repos.user_repo import UserRepo

logger = logging.getLogger(__name__)


class DirectoryService:
    """Minimal write access to the user/player directory.

    Accounts and the player catalog are owned by other systems; this exists
    to seed local deployments and tests.
    """

    def __init__(self, user_repo: UserRepo, player_repo: PlayerRepo) -> None:
        self.user_repo = user_repo
        self.player_repo = player_repo

    def add_user(self, email: str, role: str = ROLE_FREE) -> User:
        email = (email or "").strip().lower()
        if "@" not in email:
            raise InvalidInputError(f"Invalid email address: {email!r}")
        if role not in ROLES:
            raise InvalidInputError(f"Unknown role: {role}")
        if self.user_repo.get_by_email(email) is not None:
            raise ConflictError(f"Email already registered: {email}")

        user = User(
            id=new_uuid(),
            email=email,
            role=role,
            verification_status=VERIFICATION_NONE,
            claim_attempts=0,
            claimed_player_id=None,
            created_at=now_utc_iso(),
        )
        self.user_repo.insert(user)
        logger.info("Added %s user %s", role, user.id)
        return user

    def add_player(
        self,
        first_name: str,
        last_name: str,
        birth_year: int | None = None,
        club: str | None = None,
        league: str | None = None,
        position: str | None = None,
    ) -> Player:
        if not first_name.strip() or not last_name.strip():
            raise InvalidInputError("Player first and last name are required.")

        player = Player(
            id=new_uuid(),
            first_name=first_name.strip(),
            last_name=last_name.strip(),
            birth_year=birth_year,
            club=club,
            league=league,
            position=position,
            is_claimed=False,
            claimed_by_id=None,
            created_at=now_utc_iso(),
        )
        self.player_repo.insert(player)
        return player

    def get_user(self, user_id: str) -> User | None:
        return self.user_repo.get(user_id)

    def list_unclaimed_players(self, limit: int = 100) -> list[Player]:
        return self.player_repo.list_unclaimed(limit=limit)

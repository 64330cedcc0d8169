from __future__ import annotations

import logging
from dataclasses import replace

from playerclaim.core.errors import ForbiddenError, InvalidInputError, NotFoundError
from playerclaim.core.time import now_utc_iso
from playerclaim.domain.models.directory import ROLE_PREMIUM, VERIFICATION_APPROVED
from playerclaim.domain.models.profile import EDITABLE_FIELDS, MAX_VIDEOS, PlayerCustomData
from playerclaim.infrastructure.db.repos.profile_repo import ProfileRepo
from playerclaim.infrastructure.db.repos.user_repo import UserRepo

logger = logging.getLogger(__name__)


class ProfileService:
    """Owner-side edits to a claimed player's custom profile data."""

    def __init__(self, user_repo: UserRepo, profile_repo: ProfileRepo) -> None:
        self.user_repo = user_repo
        self.profile_repo = profile_repo

    def get_custom_data(self, player_id: str) -> PlayerCustomData | None:
        return self.profile_repo.get(player_id)

    def update_custom_data(self, user_id: str, player_id: str, changes: dict[str, object]) -> PlayerCustomData:
        user = self.user_repo.get(user_id)
        if user is None:
            raise NotFoundError(f"User not found: {user_id}")
        if user.role != ROLE_PREMIUM:
            raise ForbiddenError("A premium membership is required.")
        if user.claimed_player_id != player_id or user.verification_status != VERIFICATION_APPROVED:
            raise ForbiddenError("You are not allowed to edit this profile.")

        unknown = sorted(set(changes) - set(EDITABLE_FIELDS))
        if unknown:
            raise InvalidInputError(f"Unsupported profile fields: {', '.join(unknown)}")

        videos = changes.get("videos")
        if videos is not None:
            if not isinstance(videos, list):
                raise InvalidInputError("videos must be a list.")
            if len(videos) > MAX_VIDEOS:
                raise InvalidInputError(f"You can add at most {MAX_VIDEOS} videos.")
        career_history = changes.get("career_history")
        if career_history is not None and not isinstance(career_history, list):
            raise InvalidInputError("career_history must be a list.")

        current = self.profile_repo.get(player_id) or PlayerCustomData(player_id=player_id)
        supplied = {key: value for key, value in changes.items() if value is not None}
        updated = replace(current, **supplied, updated_at=now_utc_iso())
        self.profile_repo.upsert(updated)

        logger.info("Custom data for player %s updated by owner %s (%s)", player_id, user_id, ", ".join(sorted(supplied)))
        return updated

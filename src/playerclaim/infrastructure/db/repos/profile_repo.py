from __future__ import annotations

import json
from pathlib import Path

from playerclaim.domain.models.profile import PlayerCustomData
from playerclaim.infrastructure.db.sqlite import connection_scope


class ProfileRepo:
    def __init__(self, db_path: Path) -> None:
        self.db_path = db_path

    def get(self, player_id: str) -> PlayerCustomData | None:
        with connection_scope(self.db_path) as c:
            row = c.execute(
                "SELECT * FROM player_custom_data WHERE player_id = ?",
                (player_id,),
            ).fetchone()
        return self._to_custom_data(row) if row else None

    def upsert(self, data: PlayerCustomData) -> None:
        with connection_scope(self.db_path) as c:
            c.execute(
                """
                INSERT INTO player_custom_data (
                    player_id, bio, height, weight, preferred_foot, photo_url,
                    videos_json, instagram, career_history_json, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT(player_id) DO UPDATE SET
                    bio = excluded.bio,
                    height = excluded.height,
                    weight = excluded.weight,
                    preferred_foot = excluded.preferred_foot,
                    photo_url = excluded.photo_url,
                    videos_json = excluded.videos_json,
                    instagram = excluded.instagram,
                    career_history_json = excluded.career_history_json,
                    updated_at = excluded.updated_at
                """,
                (
                    data.player_id,
                    data.bio,
                    data.height,
                    data.weight,
                    data.preferred_foot,
                    data.photo_url,
                    json.dumps(data.videos, ensure_ascii=True),
                    data.instagram,
                    json.dumps(data.career_history, ensure_ascii=True),
                    data.updated_at,
                ),
            )

    @staticmethod
    def _to_custom_data(row) -> PlayerCustomData:
        return PlayerCustomData(
            player_id=row["player_id"],
            bio=row["bio"],
            height=row["height"],
            weight=row["weight"],
            preferred_foot=row["preferred_foot"],
            photo_url=row["photo_url"],
            videos=json.loads(row["videos_json"] or "[]"),
            instagram=row["instagram"],
            career_history=json.loads(row["career_history_json"] or "[]"),
            updated_at=row["updated_at"],
        )

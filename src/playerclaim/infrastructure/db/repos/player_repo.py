from __future__ import annotations

import sqlite3
from pathlib import Path

from playerclaim.domain.models.directory import Player
from playerclaim.infrastructure.db.sqlite import connection_scope


class PlayerRepo:
    def __init__(self, db_path: Path) -> None:
        self.db_path = db_path

    def get(self, player_id: str, conn: sqlite3.Connection | None = None) -> Player | None:
        with connection_scope(self.db_path, conn) as c:
            row = c.execute("SELECT * FROM players WHERE id = ?", (player_id,)).fetchone()
        return self._to_player(row) if row else None

    def insert(self, player: Player) -> None:
        with connection_scope(self.db_path) as c:
            c.execute(
                """
                INSERT INTO players (
                    id, first_name, last_name, birth_year, club, league, position,
                    is_claimed, claimed_by_id, created_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    player.id,
                    player.first_name,
                    player.last_name,
                    player.birth_year,
                    player.club,
                    player.league,
                    player.position,
                    1 if player.is_claimed else 0,
                    player.claimed_by_id,
                    player.created_at,
                ),
            )

    def list_unclaimed(self, limit: int = 100) -> list[Player]:
        with connection_scope(self.db_path) as c:
            rows = c.execute(
                """
                SELECT * FROM players
                WHERE is_claimed = 0
                ORDER BY last_name ASC, first_name ASC
                LIMIT ?
                """,
                (limit,),
            ).fetchall()
        return [self._to_player(row) for row in rows]

    def count(self, claimed: bool | None = None) -> int:
        with connection_scope(self.db_path) as c:
            if claimed is None:
                row = c.execute("SELECT COUNT(*) AS c FROM players").fetchone()
            else:
                row = c.execute(
                    "SELECT COUNT(*) AS c FROM players WHERE is_claimed = ?",
                    (1 if claimed else 0,),
                ).fetchone()
        return int(row["c"])

    def mark_claimed(self, conn: sqlite3.Connection, player_id: str, user_id: str) -> int:
        """Flip is_claimed only if nobody owns the player yet. Returns rows affected."""
        cur = conn.execute(
            """
            UPDATE players
            SET is_claimed = 1, claimed_by_id = ?
            WHERE id = ? AND is_claimed = 0
            """,
            (user_id, player_id),
        )
        return cur.rowcount

    @staticmethod
    def _to_player(row) -> Player:
        return Player(
            id=row["id"],
            first_name=row["first_name"],
            last_name=row["last_name"],
            birth_year=row["birth_year"],
            club=row["club"],
            league=row["league"],
            position=row["position"],
            is_claimed=bool(row["is_claimed"]),
            claimed_by_id=row["claimed_by_id"],
            created_at=row["created_at"],
        )

from __future__ import annotations

import sqlite3
from pathlib import Path

from playerclaim.domain.models.claim import ClaimRequest
from playerclaim.infrastructure.db.sqlite import connection_scope


class ClaimRepo:
    def __init__(self, db_path: Path) -> None:
        self.db_path = db_path

    def get(self, claim_id: str, conn: sqlite3.Connection | None = None) -> ClaimRequest | None:
        with connection_scope(self.db_path, conn) as c:
            row = c.execute("SELECT * FROM claim_requests WHERE id = ?", (claim_id,)).fetchone()
        return self._to_claim(row) if row else None

    def get_active_for_user(
        self,
        user_id: str,
        conn: sqlite3.Connection | None = None,
    ) -> ClaimRequest | None:
        with connection_scope(self.db_path, conn) as c:
            row = c.execute(
                """
                SELECT * FROM claim_requests
                WHERE user_id = ?
                  AND status IN ('pending_identity', 'pending_admin_review')
                ORDER BY created_at DESC, rowid DESC
                LIMIT 1
                """,
                (user_id,),
            ).fetchone()
        return self._to_claim(row) if row else None

    def get_for_user_with_status(self, user_id: str, status: str) -> ClaimRequest | None:
        with connection_scope(self.db_path) as c:
            row = c.execute(
                """
                SELECT * FROM claim_requests
                WHERE user_id = ? AND status = ?
                ORDER BY created_at DESC, rowid DESC
                LIMIT 1
                """,
                (user_id, status),
            ).fetchone()
        return self._to_claim(row) if row else None

    def get_latest_for_user(self, user_id: str) -> ClaimRequest | None:
        with connection_scope(self.db_path) as c:
            row = c.execute(
                """
                SELECT * FROM claim_requests
                WHERE user_id = ?
                ORDER BY created_at DESC, rowid DESC
                LIMIT 1
                """,
                (user_id,),
            ).fetchone()
        return self._to_claim(row) if row else None

    def list_by_status(self, status: str, limit: int = 1_000) -> list[ClaimRequest]:
        """Claims in `status`, oldest first."""
        with connection_scope(self.db_path) as c:
            rows = c.execute(
                """
                SELECT * FROM claim_requests
                WHERE status = ?
                ORDER BY created_at ASC, rowid ASC
                LIMIT ?
                """,
                (status, limit),
            ).fetchall()
        return [self._to_claim(row) for row in rows]

    def list_for_user(self, user_id: str) -> list[ClaimRequest]:
        with connection_scope(self.db_path) as c:
            rows = c.execute(
                """
                SELECT * FROM claim_requests
                WHERE user_id = ?
                ORDER BY created_at ASC, rowid ASC
                """,
                (user_id,),
            ).fetchall()
        return [self._to_claim(row) for row in rows]

    def count_by_status(self, status: str) -> int:
        with connection_scope(self.db_path) as c:
            row = c.execute(
                "SELECT COUNT(*) AS c FROM claim_requests WHERE status = ?",
                (status,),
            ).fetchone()
        return int(row["c"])

    def insert_if_player_unclaimed(self, conn: sqlite3.Connection, claim: ClaimRequest) -> int:
        cur = conn.execute(
            """
            INSERT INTO claim_requests (
                id, user_id, player_id, status, review_rationale, created_at, reviewed_at
            )
            SELECT ?, ?, ?, ?, ?, ?, ?
            WHERE EXISTS (SELECT 1 FROM players WHERE id = ? AND is_claimed = 0)
            """,
            (
                claim.id,
                claim.user_id,
                claim.player_id,
                claim.status,
                claim.review_rationale,
                claim.created_at,
                claim.reviewed_at,
                claim.player_id,
            ),
        )
        return cur.rowcount

    def transition_status(
        self,
        conn: sqlite3.Connection,
        claim_id: str,
        from_status: str,
        to_status: str,
        reviewed_at: str | None = None,
        review_rationale: str | None = None,
    ) -> int:
        """Compare-and-swap on status. Returns rows affected (0 when the claim moved on)."""
        cur = conn.execute(
            """
            UPDATE claim_requests
            SET status = ?,
                reviewed_at = COALESCE(?, reviewed_at),
                review_rationale = COALESCE(?, review_rationale)
            WHERE id = ? AND status = ?
            """,
            (to_status, reviewed_at, review_rationale, claim_id, from_status),
        )
        return cur.rowcount

    @staticmethod
    def _to_claim(row) -> ClaimRequest:
        return ClaimRequest(
            id=row["id"],
            user_id=row["user_id"],
            player_id=row["player_id"],
            status=row["status"],
            review_rationale=row["review_rationale"],
            created_at=row["created_at"],
            reviewed_at=row["reviewed_at"],
        )

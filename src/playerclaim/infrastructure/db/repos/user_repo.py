from __future__ import annotations

import sqlite3
from pathlib import Path

from playerclaim.domain.models.claim import (
    CLAIM_PENDING_ADMIN_REVIEW,
    CLAIM_PENDING_IDENTITY,
    MAX_CLAIM_ATTEMPTS,
)
from playerclaim.domain.models.directory import (
    ROLE_PREMIUM,
    VERIFICATION_APPROVED,
    VERIFICATION_PENDING_IDENTITY,
    User,
)
from playerclaim.infrastructure.db.sqlite import connection_scope


class UserRepo:
    def __init__(self, db_path: Path) -> None:
        self.db_path = db_path

    def get(self, user_id: str, conn: sqlite3.Connection | None = None) -> User | None:
        with connection_scope(self.db_path, conn) as c:
            row = c.execute("SELECT * FROM users WHERE id = ?", (user_id,)).fetchone()
        return self._to_user(row) if row else None

    def get_by_email(self, email: str) -> User | None:
        with connection_scope(self.db_path) as c:
            row = c.execute("SELECT * FROM users WHERE email = ?", (email,)).fetchone()
        return self._to_user(row) if row else None

    def insert(self, user: User) -> None:
        with connection_scope(self.db_path) as c:
            c.execute(
                """
                INSERT INTO users (
                    id, email, role, verification_status, claim_attempts, claimed_player_id, created_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    user.id,
                    user.email,
                    user.role,
                    user.verification_status,
                    user.claim_attempts,
                    user.claimed_player_id,
                    user.created_at,
                ),
            )

    def list(self, offset: int = 0, limit: int = 50, role: str | None = None) -> list[User]:
        with connection_scope(self.db_path) as c:
            if role:
                rows = c.execute(
                    """
                    SELECT * FROM users
                    WHERE role = ?
                    ORDER BY created_at DESC, rowid DESC
                    LIMIT ? OFFSET ?
                    """,
                    (role, limit, offset),
                ).fetchall()
            else:
                rows = c.execute(
                    """
                    SELECT * FROM users
                    ORDER BY created_at DESC, rowid DESC
                    LIMIT ? OFFSET ?
                    """,
                    (limit, offset),
                ).fetchall()
        return [self._to_user(row) for row in rows]

    def count(self, role: str | None = None) -> int:
        with connection_scope(self.db_path) as c:
            if role:
                row = c.execute("SELECT COUNT(*) AS c FROM users WHERE role = ?", (role,)).fetchone()
            else:
                row = c.execute("SELECT COUNT(*) AS c FROM users").fetchone()
        return int(row["c"])

    def consume_claim_attempt(self, conn: sqlite3.Connection, user_id: str) -> int:
        """Spend one attempt if the user is still eligible. Returns rows affected."""
        cur = conn.execute(
            """
            UPDATE users
            SET claim_attempts = claim_attempts + 1,
                verification_status = ?
            WHERE id = ?
              AND role = ?
              AND claim_attempts < ?
              AND NOT EXISTS (
                  SELECT 1 FROM claim_requests
                  WHERE claim_requests.user_id = users.id
                    AND claim_requests.status IN (?, ?)
              )
            """,
            (
                VERIFICATION_PENDING_IDENTITY,
                user_id,
                ROLE_PREMIUM,
                MAX_CLAIM_ATTEMPTS,
                CLAIM_PENDING_IDENTITY,
                CLAIM_PENDING_ADMIN_REVIEW,
            ),
        )
        return cur.rowcount

    def set_verification_status(self, conn: sqlite3.Connection, user_id: str, status: str) -> int:
        cur = conn.execute(
            "UPDATE users SET verification_status = ? WHERE id = ?",
            (status, user_id),
        )
        return cur.rowcount

    def assign_claimed_player(self, conn: sqlite3.Connection, user_id: str, player_id: str) -> int:
        cur = conn.execute(
            """
            UPDATE users
            SET claimed_player_id = ?, verification_status = ?
            WHERE id = ?
            """,
            (player_id, VERIFICATION_APPROVED, user_id),
        )
        return cur.rowcount

    def set_role(self, conn: sqlite3.Connection, user_id: str, role: str) -> int:
        cur = conn.execute("UPDATE users SET role = ? WHERE id = ?", (role, user_id))
        return cur.rowcount

    @staticmethod
    def _to_user(row) -> User:
        return User(
            id=row["id"],
            email=row["email"],
            role=row["role"],
            verification_status=row["verification_status"],
            claim_attempts=int(row["claim_attempts"]),
            claimed_player_id=row["claimed_player_id"],
            created_at=row["created_at"],
        )

from __future__ import annotations

import sqlite3
from pathlib import Path

from playerclaim.domain.models.identity import IdentityVerificationRecord
from playerclaim.infrastructure.db.sqlite import connection_scope


class IdentityRepo:
    """Append-only store of identity verification attempts."""

    def __init__(self, db_path: Path) -> None:
        self.db_path = db_path

    def append(self, record: IdentityVerificationRecord, conn: sqlite3.Connection | None = None) -> None:
        with connection_scope(self.db_path, conn) as c:
            c.execute(
                """
                INSERT INTO identity_verifications (
                    id, user_id, national_id_hash, first_name, last_name, birth_year, verified, created_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    record.id,
                    record.user_id,
                    record.national_id_hash,
                    record.first_name,
                    record.last_name,
                    record.birth_year,
                    1 if record.verified else 0,
                    record.created_at,
                ),
            )

    def get_latest_for_user(self, user_id: str) -> IdentityVerificationRecord | None:
        with connection_scope(self.db_path) as c:
            row = c.execute(
                """
                SELECT * FROM identity_verifications
                WHERE user_id = ?
                ORDER BY created_at DESC, rowid DESC
                LIMIT 1
                """,
                (user_id,),
            ).fetchone()
        return self._to_record(row) if row else None

    def list_for_user(self, user_id: str) -> list[IdentityVerificationRecord]:
        with connection_scope(self.db_path) as c:
            rows = c.execute(
                """
                SELECT * FROM identity_verifications
                WHERE user_id = ?
                ORDER BY created_at ASC, rowid ASC
                """,
                (user_id,),
            ).fetchall()
        return [self._to_record(row) for row in rows]

    @staticmethod
    def _to_record(row) -> IdentityVerificationRecord:
        return IdentityVerificationRecord(
            id=row["id"],
            user_id=row["user_id"],
            national_id_hash=row["national_id_hash"],
            first_name=row["first_name"],
            last_name=row["last_name"],
            birth_year=int(row["birth_year"]),
            verified=bool(row["verified"]),
            created_at=row["created_at"],
        )

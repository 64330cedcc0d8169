from __future__ import annotations

import json
import sqlite3
from pathlib import Path

from playerclaim.domain.models.audit import AuditLogEntry
from playerclaim.infrastructure.db.sqlite import connection_scope


class AuditRepo:
    def __init__(self, db_path: Path) -> None:
        self.db_path = db_path

    def append(self, conn: sqlite3.Connection, entry: AuditLogEntry) -> None:
        conn.execute(
            """
            INSERT INTO audit_log (id, admin_id, action, target_type, target_id, meta_json, created_at)
            VALUES (?, ?, ?, ?, ?, ?, ?)
            """,
            (
                entry.id,
                entry.admin_id,
                entry.action,
                entry.target_type,
                entry.target_id,
                json.dumps(entry.meta, ensure_ascii=True, sort_keys=True),
                entry.created_at,
            ),
        )

    def list(self, offset: int = 0, limit: int = 50) -> list[AuditLogEntry]:
        with connection_scope(self.db_path) as c:
            rows = c.execute(
                """
                SELECT * FROM audit_log
                ORDER BY created_at DESC, rowid DESC
                LIMIT ? OFFSET ?
                """,
                (limit, offset),
            ).fetchall()
        return [self._to_entry(row) for row in rows]

    def list_for_target(self, target_type: str, target_id: str) -> list[AuditLogEntry]:
        with connection_scope(self.db_path) as c:
            rows = c.execute(
                """
                SELECT * FROM audit_log
                WHERE target_type = ? AND target_id = ?
                ORDER BY created_at ASC, rowid ASC
                """,
                (target_type, target_id),
            ).fetchall()
        return [self._to_entry(row) for row in rows]

    def count(self) -> int:
        with connection_scope(self.db_path) as c:
            row = c.execute("SELECT COUNT(*) AS c FROM audit_log").fetchone()
        return int(row["c"])

    @staticmethod
    def _to_entry(row) -> AuditLogEntry:
        return AuditLogEntry(
            id=row["id"],
            admin_id=row["admin_id"],
            action=row["action"],
            target_type=row["target_type"],
            target_id=row["target_id"],
            meta=json.loads(row["meta_json"] or "{}"),
            created_at=row["created_at"],
        )

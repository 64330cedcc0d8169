from __future__ import annotations

import sqlite3
from dataclasses import dataclass

from playerclaim.core.errors import InvalidInputError
from playerclaim.core.ids import new_uuid
from playerclaim.core.time import now_utc_iso
from playerclaim.domain.models.audit import AuditLogEntry
from playerclaim.infrastructure.db.repos.audit_repo import AuditRepo

MAX_PAGE_SIZE = 200
MAX_OFFSET = 2**63 - 1


@dataclass(slots=True)
class AuditPage:
    entries: list[AuditLogEntry]
    total: int
    page: int
    limit: int


class AuditService:
    """Append-only ledger of privileged state changes.

    `record` must run inside the caller's transaction: if the insert fails
    the whole transaction fails with it.
    """

    def __init__(self, audit_repo: AuditRepo) -> None:
        self.audit_repo = audit_repo

    def record(
        self,
        conn: sqlite3.Connection,
        admin_id: str,
        action: str,
        target_type: str,
        target_id: str,
        meta: dict[str, object] | None = None,
    ) -> AuditLogEntry:
        entry = AuditLogEntry(
            id=new_uuid(),
            admin_id=admin_id,
            action=action,
            target_type=target_type,
            target_id=target_id,
            meta=dict(meta or {}),
            created_at=now_utc_iso(),
        )
        self.audit_repo.append(conn, entry)
        return entry

    def list(self, page: int = 1, limit: int = 50) -> AuditPage:
        page, limit = validate_page(page, limit)
        entries = self.audit_repo.list(offset=(page - 1) * limit, limit=limit)
        return AuditPage(entries=entries, total=self.audit_repo.count(), page=page, limit=limit)


def validate_page(page: int, limit: int) -> tuple[int, int]:
    if page < 1:
        raise InvalidInputError("page must be >= 1")
    if limit < 1 or limit > MAX_PAGE_SIZE:
        raise InvalidInputError(f"limit must be between 1 and {MAX_PAGE_SIZE}")
    if (page - 1) * limit > MAX_OFFSET:
        raise InvalidInputError("page is out of range")
    return page, limit

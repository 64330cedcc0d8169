from __future__ import annotations

from dataclasses import dataclass, field

ACTION_CLAIM_APPROVED = "CLAIM_APPROVED"
ACTION_CLAIM_REJECTED = "CLAIM_REJECTED"
ACTION_USER_ROLE_CHANGED = "USER_ROLE_CHANGED"


@dataclass(slots=True)
class AuditLogEntry:
    id: str
    admin_id: str
    action: str
    target_type: str
    target_id: str
    meta: dict[str, object] = field(default_factory=dict)
    created_at: str = ""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from playerclaim.core.hashing import looks_like_bcrypt
from playerclaim.domain.models.claim import MAX_CLAIM_ATTEMPTS
from playerclaim.infrastructure.db.sqlite import read_connection


@dataclass(slots=True)
class DoctorIssue:
    check: str
    level: str
    message: str


@dataclass(slots=True)
class DoctorReport:
    ok: bool
    checks_run: int
    issues: list[DoctorIssue]
    db_runtime: dict[str, object]


class HealthService:
    def __init__(self, db_path: Path) -> None:
        self.db_path = db_path

    def run_doctor(self) -> DoctorReport:
        issues: list[DoctorIssue] = []
        checks_run = 0
        db_runtime: dict[str, object] = {}

        with read_connection(self.db_path) as conn:
            # Check 1: database runtime pragmas support concurrent access.
            checks_run += 1
            journal_mode = str(conn.execute("PRAGMA journal_mode;").fetchone()[0]).lower()
            busy_timeout_ms = int(conn.execute("PRAGMA busy_timeout;").fetchone()[0])
            foreign_keys = int(conn.execute("PRAGMA foreign_keys;").fetchone()[0])
            db_runtime = {
                "journal_mode": journal_mode,
                "busy_timeout_ms": busy_timeout_ms,
                "foreign_keys": bool(foreign_keys),
            }
            if journal_mode != "wal":
                issues.append(
                    DoctorIssue(
                        check="db_runtime",
                        level="error",
                        message=f"SQLite journal_mode is '{journal_mode}', expected 'wal' for concurrent access.",
                    )
                )
            if foreign_keys != 1:
                issues.append(
                    DoctorIssue(check="db_runtime", level="error", message="SQLite foreign_keys pragma is disabled.")
                )
            if busy_timeout_ms < 1_000:
                issues.append(
                    DoctorIssue(
                        check="db_runtime",
                        level="warning",
                        message=f"SQLite busy_timeout is low ({busy_timeout_ms}ms); concurrent claims may fail.",
                    )
                )

            # Check 2: at most one active claim per user.
            checks_run += 1
            rows = conn.execute(
                """
                SELECT user_id, COUNT(*) AS c
                FROM claim_requests
                WHERE status IN ('pending_identity', 'pending_admin_review')
                GROUP BY user_id
                HAVING COUNT(*) > 1
                """
            ).fetchall()
            for row in rows:
                issues.append(
                    DoctorIssue(
                        check="single_active_claim",
                        level="error",
                        message=f"User {row['user_id']} has {row['c']} active claims.",
                    )
                )

            # Check 3: every claimed player is backed by exactly one approved claim of its owner.
            checks_run += 1
            rows = conn.execute(
                """
                SELECT p.id, p.claimed_by_id,
                       COUNT(c.id) AS approved,
                       SUM(CASE WHEN c.user_id = p.claimed_by_id THEN 1 ELSE 0 END) AS owner_approved,
                       u.claimed_player_id AS owner_back_ref
                FROM players p
                LEFT JOIN claim_requests c ON c.player_id = p.id AND c.status = 'approved'
                LEFT JOIN users u ON u.id = p.claimed_by_id
                WHERE p.is_claimed = 1
                GROUP BY p.id
                """
            ).fetchall()
            for row in rows:
                if int(row["approved"]) != 1 or int(row["owner_approved"] or 0) != 1:
                    issues.append(
                        DoctorIssue(
                            check="claimed_player_ownership",
                            level="error",
                            message=(
                                f"Player {row['id']} is claimed by {row['claimed_by_id']} but has "
                                f"{row['approved']} approved claim(s) ({row['owner_approved'] or 0} by the owner)."
                            ),
                        )
                    )
                elif row["owner_back_ref"] != row["id"]:
                    issues.append(
                        DoctorIssue(
                            check="claimed_player_ownership",
                            level="warning",
                            message=f"Owner {row['claimed_by_id']} of player {row['id']} does not point back to it.",
                        )
                    )

            # Check 4: nobody is above the attempt cap.
            checks_run += 1
            rows = conn.execute(
                "SELECT id, claim_attempts FROM users WHERE claim_attempts > ?",
                (MAX_CLAIM_ATTEMPTS,),
            ).fetchall()
            for row in rows:
                issues.append(
                    DoctorIssue(
                        check="claim_attempt_cap",
                        level="error",
                        message=f"User {row['id']} has {row['claim_attempts']} claim attempts.",
                    )
                )

            # Check 5: identity numbers are stored only as bcrypt hashes.
            checks_run += 1
            rows = conn.execute("SELECT id, national_id_hash FROM identity_verifications").fetchall()
            for row in rows:
                if not looks_like_bcrypt(str(row["national_id_hash"])):
                    issues.append(
                        DoctorIssue(
                            check="identity_hashes",
                            level="error",
                            message=f"Identity record {row['id']} does not hold a bcrypt hash.",
                        )
                    )

        return DoctorReport(
            ok=not any(i.level == "error" for i in issues),
            checks_run=checks_run,
            issues=issues,
            db_runtime=db_runtime,
        )

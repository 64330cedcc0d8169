from __future__ import annotations

from datetime import datetime, timezone


def now_utc_iso() -> str:
    """Return an ISO timestamp in UTC with microsecond precision.

    Microseconds keep created_at ordering stable for the review queue.
    """
    return datetime.now(timezone.utc).isoformat(timespec="microseconds")


def current_year() -> int:
    return datetime.now(timezone.utc).year

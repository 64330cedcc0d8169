from __future__ import annotations

from dataclasses import dataclass, field

EDITABLE_FIELDS = (
    "bio",
    "height",
    "weight",
    "preferred_foot",
    "photo_url",
    "videos",
    "instagram",
    "career_history",
)
MAX_VIDEOS = 4


@dataclass(slots=True)
class PlayerCustomData:
    player_id: str
    bio: str | None = None
    height: float | None = None
    weight: float | None = None
    preferred_foot: str | None = None
    photo_url: str | None = None
    videos: list[dict[str, object]] = field(default_factory=list)
    instagram: str | None = None
    career_history: list[dict[str, object]] = field(default_factory=list)
    updated_at: str = ""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import pytest

from playerclaim.application.wiring import Services, build_services
from playerclaim.core.config import AppSettings
from playerclaim.core.errors import ProviderUnavailableError
from playerclaim.domain.models.directory import Player, User
from playerclaim.domain.models.identity import DeclaredIdentity
from playerclaim.infrastructure.db.sqlite import default_schema_path, initialize_schema


class FakeProvider:
    """Scripted identity authority. `answer=None` simulates an outage."""

    def __init__(self, answer: bool | None = True) -> None:
        self.answer = answer
        self.calls: list[tuple[str, str, str, int]] = []

    def verify(self, national_id: str, first_name: str, last_name: str, birth_year: int) -> bool:
        self.calls.append((national_id, first_name, last_name, birth_year))
        if self.answer is None:
            raise ProviderUnavailableError("authority unreachable")
        return self.answer


def make_settings(mode: str = "strict") -> AppSettings:
    return AppSettings(
        verification_mode=mode,
        kps_endpoint="http://kps.test/Service/KPSPublic.asmx",
        verification_timeout_seconds=1.0,
        identity_hash_rounds=4,
    )


def declared(national_id: str = "10000000146") -> DeclaredIdentity:
    return DeclaredIdentity(national_id=national_id, first_name="Ahmet", last_name="Yilmaz", birth_year=1998)


@dataclass
class World:
    db_path: Path
    provider: FakeProvider
    services: Services
    premium: User
    admin: User
    player: Player


def build_world(tmp_path: Path, mode: str = "strict", answer: bool | None = True) -> World:
    db_path = tmp_path / "playerclaim.db"
    initialize_schema(db_path, default_schema_path())
    provider = FakeProvider(answer)
    services = build_services(db_path, make_settings(mode), provider=provider)

    premium = services.directory.add_user("ahmet@example.com", role="premium")
    admin = services.directory.add_user("admin@example.com", role="admin")
    player = services.directory.add_player("Ahmet", "Yilmaz", birth_year=1998, club="Bursaspor", position="CM")
    return World(db_path=db_path, provider=provider, services=services, premium=premium, admin=admin, player=player)


@pytest.fixture
def world(tmp_path: Path) -> World:
    return build_world(tmp_path)

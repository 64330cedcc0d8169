from pathlib import Path

import pytest

from playerclaim.cli.main import main
from playerclaim.core.config import load_paths
from playerclaim.infrastructure.db.repos.player_repo import PlayerRepo
from playerclaim.infrastructure.db.repos.user_repo import UserRepo


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("PLAYERCLAIM_HOME", raising=False)
    monkeypatch.delenv("PLAYERCLAIM_VERIFICATION_MODE", raising=False)


def test_commands_require_init(tmp_path: Path) -> None:
    assert main(["--project-root", str(tmp_path), "directory", "unclaimed"]) == 1


def test_init_seed_and_doctor(tmp_path: Path) -> None:
    root = str(tmp_path)
    assert main(["--project-root", root, "init"]) == 0
    assert main(["--project-root", root, "directory", "add-user", "--email", "Admin@Example.com", "--role", "admin"]) == 0
    assert main(["--project-root", root, "directory", "add-player", "--first-name", "Ahmet", "--last-name", "Yilmaz"]) == 0
    assert main(["--project-root", root, "directory", "unclaimed"]) == 0

    db_path = load_paths(tmp_path).db_path
    admin = UserRepo(db_path).get_by_email("admin@example.com")
    assert admin is not None
    assert admin.role == "admin"
    assert PlayerRepo(db_path).count() == 1

    assert main(["--project-root", root, "admin", "--admin-id", admin.id, "dashboard"]) == 0
    assert main(["--project-root", root, "doctor"]) == 0


def test_admin_commands_require_admin(tmp_path: Path) -> None:
    root = str(tmp_path)
    assert main(["--project-root", root, "init"]) == 0
    assert main(["--project-root", root, "directory", "add-user", "--email", "free@example.com"]) == 0

    user = UserRepo(load_paths(tmp_path).db_path).get_by_email("free@example.com")
    assert user is not None
    assert main(["--project-root", root, "admin", "--admin-id", user.id, "pending"]) == 1

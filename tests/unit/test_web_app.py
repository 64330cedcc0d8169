from pathlib import Path

from fastapi.testclient import TestClient

from conftest import FakeProvider, make_settings
from playerclaim.application.wiring import build_services
from playerclaim.core.config import AppPaths
from playerclaim.core.errors import ErrorKind
from playerclaim.web.app import ERROR_STATUS, create_app

IDENTITY = {"national_id": "10000000146", "first_name": "Ahmet", "last_name": "Yilmaz", "birth_year": 1998}


def _paths(tmp_path: Path) -> AppPaths:
    project_root = tmp_path / "proj"
    project_root.mkdir(parents=True, exist_ok=True)
    return AppPaths(
        project_root=project_root,
        data_dir=project_root / ".playerclaim",
        db_path=project_root / ".playerclaim" / "playerclaim.db",
    )


def test_every_error_kind_has_a_status() -> None:
    assert set(ERROR_STATUS) == set(ErrorKind)


def test_web_app_claim_lifecycle_end_to_end(tmp_path: Path) -> None:
    paths = _paths(tmp_path)
    provider = FakeProvider(True)
    app = create_app(paths, make_settings(), provider=provider)
    client = TestClient(app)

    seed = build_services(paths.db_path, make_settings(), provider=provider)
    premium = seed.directory.add_user("ahmet@example.com", role="premium")
    free = seed.directory.add_user("free@example.com")
    admin = seed.directory.add_user("admin@example.com", role="admin")
    player = seed.directory.add_player("Ahmet", "Yilmaz", birth_year=1998, club="Bursaspor")

    r = client.get("/api/health")
    assert r.status_code == 200

    r = client.get("/api/players/unclaimed")
    assert r.status_code == 200
    assert r.json()["count"] == 1

    # Free users cannot claim.
    r = client.post("/api/claims", json={"player_id": player.id}, headers={"X-User-Id": free.id})
    assert r.status_code == 403
    assert r.json()["error"] == "forbidden"

    r = client.post("/api/claims", json={"player_id": player.id}, headers={"X-User-Id": premium.id})
    assert r.status_code == 200
    claim_id = r.json()["claim_request_id"]
    assert r.json()["status"] == "pending_identity"
    assert r.json()["next_step"] == "identity_verification"

    r = client.post("/api/claims", json={"player_id": player.id}, headers={"X-User-Id": premium.id})
    assert r.status_code == 409
    assert r.json()["error"] == "conflict"

    r = client.post(
        "/api/identity/verify",
        json={**IDENTITY, "national_id": "123"},
        headers={"X-User-Id": premium.id},
    )
    assert r.status_code == 422
    assert r.json()["error"] == "invalid_input"

    r = client.post("/api/identity/verify", json=IDENTITY, headers={"X-User-Id": premium.id})
    assert r.status_code == 200
    assert r.json()["status"] == "pending_admin_review"

    r = client.get("/api/claims/me", headers={"X-User-Id": premium.id})
    assert r.status_code == 200
    assert r.json()["claim"]["id"] == claim_id
    assert r.json()["player"]["club"] == "Bursaspor"

    # Admin endpoints require the admin role.
    r = client.get("/api/admin/claims/pending", headers={"X-User-Id": premium.id})
    assert r.status_code == 403

    r = client.get("/api/admin/claims/pending", headers={"X-User-Id": admin.id})
    assert r.status_code == 200
    assert r.json()["count"] == 1
    assert r.json()["claims"][0]["identity"]["verified"] is True

    r = client.put(f"/api/admin/claims/{claim_id}/approve", headers={"X-User-Id": admin.id})
    assert r.status_code == 200
    assert r.json()["status"] == "approved"

    r = client.put(f"/api/admin/claims/{claim_id}/approve", headers={"X-User-Id": admin.id})
    assert r.status_code == 409

    r = client.put(
        f"/api/claims/players/{player.id}/custom-data",
        json={"bio": "Box-to-box midfielder", "videos": [{"url": "https://video.example/1"}]},
        headers={"X-User-Id": premium.id},
    )
    assert r.status_code == 200
    assert r.json()["custom_data"]["bio"] == "Box-to-box midfielder"

    r = client.get("/api/admin/audit-logs?page=1&limit=10", headers={"X-User-Id": admin.id})
    assert r.status_code == 200
    assert r.json()["meta"]["total"] == 1
    assert r.json()["data"][0]["action"] == "CLAIM_APPROVED"

    r = client.get("/api/admin/audit-logs?page=0", headers={"X-User-Id": admin.id})
    assert r.status_code == 422

    r = client.put(f"/api/admin/users/{free.id}/role", json={"role": "premium"}, headers={"X-User-Id": admin.id})
    assert r.status_code == 200
    assert r.json()["user"]["role"] == "premium"

    r = client.get("/api/admin/users?role=premium", headers={"X-User-Id": admin.id})
    assert r.status_code == 200
    assert r.json()["meta"]["total"] == 2

    r = client.get("/api/admin/dashboard", headers={"X-User-Id": admin.id})
    assert r.status_code == 200
    assert r.json()["claimed_players"] == 1
    assert r.json()["pending_claims"] == 0


def test_web_app_reject_and_unavailable_authority(tmp_path: Path) -> None:
    paths = _paths(tmp_path)
    provider = FakeProvider(None)
    client = TestClient(create_app(paths, make_settings("strict"), provider=provider))

    seed = build_services(paths.db_path, make_settings(), provider=provider)
    premium = seed.directory.add_user("ahmet@example.com", role="premium")
    admin = seed.directory.add_user("admin@example.com", role="admin")
    player = seed.directory.add_player("Ahmet", "Yilmaz")

    r = client.post("/api/claims", json={"player_id": player.id}, headers={"X-User-Id": premium.id})
    claim_id = r.json()["claim_request_id"]

    r = client.post("/api/identity/verify", json=IDENTITY, headers={"X-User-Id": premium.id})
    assert r.status_code == 503
    assert r.json()["error"] == "service_unavailable"

    provider.answer = False
    r = client.post("/api/identity/verify", json=IDENTITY, headers={"X-User-Id": premium.id})
    assert r.status_code == 422
    assert r.json()["error"] == "validation_failed"

    provider.answer = True
    r = client.post("/api/identity/verify", json=IDENTITY, headers={"X-User-Id": premium.id})
    assert r.status_code == 200

    r = client.put(
        f"/api/admin/claims/{claim_id}/reject",
        json={"reason": "Photo ID mismatch"},
        headers={"X-User-Id": admin.id},
    )
    assert r.status_code == 200
    assert r.json()["status"] == "rejected"

    r = client.get("/api/claims/me", headers={"X-User-Id": premium.id})
    assert r.json()["claim"]["review_rationale"] == "Photo ID mismatch"

    r = client.put(f"/api/admin/claims/{claim_id}/reject", headers={"X-User-Id": admin.id})
    assert r.status_code == 409

from conftest import World, declared
from playerclaim.application.services.health_service import HealthService
from playerclaim.infrastructure.db.sqlite import get_connection


def test_doctor_passes_after_full_lifecycle(world: World) -> None:
    result = world.services.claims.start_claim(world.premium.id, world.player.id)
    world.services.identity.verify_identity(world.premium.id, declared())
    world.services.adjudication.approve(result.claim_request_id, world.admin.id)

    report = HealthService(db_path=world.db_path).run_doctor()
    assert report.ok is True
    assert report.checks_run == 5
    assert report.db_runtime["journal_mode"] == "wal"
    assert report.db_runtime["foreign_keys"] is True
    assert int(report.db_runtime["busy_timeout_ms"]) >= 30_000
    assert report.issues == []


def test_doctor_flags_plaintext_identity_numbers(world: World) -> None:
    with get_connection(world.db_path) as conn:
        conn.execute(
            """
            INSERT INTO identity_verifications (
                id, user_id, national_id_hash, first_name, last_name, birth_year, verified, created_at
            ) VALUES ('iv1', ?, '10000000146', 'Ahmet', 'Yilmaz', 1998, 1, 'now')
            """,
            (world.premium.id,),
        )
        conn.commit()

    report = HealthService(db_path=world.db_path).run_doctor()
    assert report.ok is False
    assert [i.check for i in report.issues] == ["identity_hashes"]

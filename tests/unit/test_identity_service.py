from pathlib import Path

import pytest

from conftest import World, build_world, declared
from playerclaim.application.services.identity_service import validate_declared_identity
from playerclaim.core.errors import (
    InvalidInputError,
    NotFoundError,
    ServiceUnavailableError,
    ValidationFailedError,
)
from playerclaim.core.hashing import looks_like_bcrypt
from playerclaim.core.time import current_year
from playerclaim.domain.models.claim import CLAIM_PENDING_ADMIN_REVIEW, CLAIM_PENDING_IDENTITY
from playerclaim.domain.models.directory import VERIFICATION_PENDING_ADMIN_REVIEW
from playerclaim.infrastructure.db.repos.identity_repo import IdentityRepo


def test_verified_identity_moves_claim_to_admin_review(world: World) -> None:
    started = world.services.claims.start_claim(world.premium.id, world.player.id)

    outcome = world.services.identity.verify_identity(world.premium.id, declared())

    assert outcome.claim_request_id == started.claim_request_id
    assert outcome.status == CLAIM_PENDING_ADMIN_REVIEW
    assert world.provider.calls == [("10000000146", "Ahmet", "Yilmaz", 1998)]

    summary = world.services.claims.get_my_claim(world.premium.id)
    assert summary is not None
    assert summary.claim.status == CLAIM_PENDING_ADMIN_REVIEW
    user = world.services.directory.get_user(world.premium.id)
    assert user is not None
    assert user.verification_status == VERIFICATION_PENDING_ADMIN_REVIEW

    records = IdentityRepo(world.db_path).list_for_user(world.premium.id)
    assert len(records) == 1
    assert records[0].verified is True
    assert records[0].id == outcome.record_id


def test_failed_identity_is_recorded_and_claim_stays_open(tmp_path: Path) -> None:
    world = build_world(tmp_path, answer=False)
    world.services.claims.start_claim(world.premium.id, world.player.id)

    with pytest.raises(ValidationFailedError):
        world.services.identity.verify_identity(world.premium.id, declared())

    summary = world.services.claims.get_my_claim(world.premium.id)
    assert summary is not None
    assert summary.claim.status == CLAIM_PENDING_IDENTITY

    records = IdentityRepo(world.db_path).list_for_user(world.premium.id)
    assert len(records) == 1
    assert records[0].verified is False

    # Resubmission after a mismatch does not cost an attempt.
    world.provider.answer = True
    world.services.identity.verify_identity(world.premium.id, declared())
    user = world.services.directory.get_user(world.premium.id)
    assert user is not None
    assert user.claim_attempts == 1
    assert len(IdentityRepo(world.db_path).list_for_user(world.premium.id)) == 2


def test_national_id_is_stored_only_as_bcrypt_hash(world: World) -> None:
    world.services.claims.start_claim(world.premium.id, world.player.id)
    world.services.identity.verify_identity(world.premium.id, declared())

    record = IdentityRepo(world.db_path).get_latest_for_user(world.premium.id)
    assert record is not None
    assert record.national_id_hash != "10000000146"
    assert looks_like_bcrypt(record.national_id_hash)
    assert world.services.identity.hasher.matches("10000000146", record.national_id_hash)

    for path in world.db_path.parent.glob(world.db_path.name + "*"):
        assert b"10000000146" not in path.read_bytes()


def test_strict_mode_outage_is_service_unavailable_without_record(tmp_path: Path) -> None:
    world = build_world(tmp_path, mode="strict", answer=None)
    world.services.claims.start_claim(world.premium.id, world.player.id)

    with pytest.raises(ServiceUnavailableError):
        world.services.identity.verify_identity(world.premium.id, declared())

    assert IdentityRepo(world.db_path).list_for_user(world.premium.id) == []
    summary = world.services.claims.get_my_claim(world.premium.id)
    assert summary is not None
    assert summary.claim.status == CLAIM_PENDING_IDENTITY


def test_permissive_mode_outage_counts_as_verified(tmp_path: Path) -> None:
    world = build_world(tmp_path, mode="permissive", answer=None)
    world.services.claims.start_claim(world.premium.id, world.player.id)

    outcome = world.services.identity.verify_identity(world.premium.id, declared())

    assert outcome.status == CLAIM_PENDING_ADMIN_REVIEW
    record = IdentityRepo(world.db_path).get_latest_for_user(world.premium.id)
    assert record is not None
    assert record.verified is True


def test_verify_without_pending_claim_is_not_found(world: World) -> None:
    with pytest.raises(NotFoundError):
        world.services.identity.verify_identity(world.premium.id, declared())
    assert world.provider.calls == []


def test_verify_after_claim_moved_to_review_is_not_found(world: World) -> None:
    world.services.claims.start_claim(world.premium.id, world.player.id)
    world.services.identity.verify_identity(world.premium.id, declared())

    with pytest.raises(NotFoundError):
        world.services.identity.verify_identity(world.premium.id, declared())


def test_validate_declared_identity_trims_names() -> None:
    identity = validate_declared_identity("10000000146", "  Ahmet ", " Yilmaz", 1998)
    assert identity.first_name == "Ahmet"
    assert identity.last_name == "Yilmaz"
    assert "10000000146" not in repr(identity)


@pytest.mark.parametrize(
    "national_id, first_name, last_name, birth_year",
    [
        ("1234567890", "Ahmet", "Yilmaz", 1998),
        ("1234567890a", "Ahmet", "Yilmaz", 1998),
        ("\u0661" * 11, "Ahmet", "Yilmaz", 1998),
        ("10000000146", "A", "Yilmaz", 1998),
        ("10000000146", "Ahmet", "Y" * 51, 1998),
        ("10000000146", "Ahmet", "Yilmaz", 1939),
        ("10000000146", "Ahmet", "Yilmaz", current_year() - 15),
    ],
)
def test_validate_declared_identity_rejects_bad_input(
    national_id: str, first_name: str, last_name: str, birth_year: int
) -> None:
    with pytest.raises(InvalidInputError):
        validate_declared_identity(national_id, first_name, last_name, birth_year)

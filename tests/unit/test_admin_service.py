import pytest

from conftest import World, declared
from playerclaim.core.errors import InvalidInputError, NotFoundError
from playerclaim.infrastructure.db.repos.audit_repo import AuditRepo


def test_list_users_filters_by_role_and_paginates(world: World) -> None:
    world.services.directory.add_user("one@example.com")
    world.services.directory.add_user("two@example.com")

    everyone = world.services.admin.list_users(page=1, limit=10)
    assert everyone.total == 4

    free = world.services.admin.list_users(page=1, limit=1, role="free")
    assert free.total == 2
    assert [u.email for u in free.users] == ["two@example.com"]

    with pytest.raises(InvalidInputError):
        world.services.admin.list_users(role="owner")
    with pytest.raises(InvalidInputError):
        world.services.admin.list_users(page=10**19)


def test_set_user_role_is_audited(world: World) -> None:
    free = world.services.directory.add_user("upgrade@example.com")

    user = world.services.admin.set_user_role(free.id, "premium", world.admin.id)

    assert user.role == "premium"
    stored = world.services.directory.get_user(free.id)
    assert stored is not None
    assert stored.role == "premium"

    entries = AuditRepo(world.db_path).list_for_target("User", free.id)
    assert len(entries) == 1
    assert entries[0].action == "USER_ROLE_CHANGED"
    assert entries[0].meta == {"previous_role": "free", "new_role": "premium"}


def test_set_user_role_rejects_unknown_user_and_role(world: World) -> None:
    with pytest.raises(NotFoundError):
        world.services.admin.set_user_role("missing", "premium", world.admin.id)
    with pytest.raises(InvalidInputError):
        world.services.admin.set_user_role(world.premium.id, "superuser", world.admin.id)
    assert AuditRepo(world.db_path).count() == 0


def test_dashboard_counts(world: World) -> None:
    world.services.directory.add_player("Mehmet", "Kaya")
    result = world.services.claims.start_claim(world.premium.id, world.player.id)
    world.services.identity.verify_identity(world.premium.id, declared())

    stats = world.services.admin.dashboard_stats()
    assert stats.total_users == 2
    assert stats.premium_users == 1
    assert stats.total_players == 2
    assert stats.claimed_players == 0
    assert stats.pending_claims == 1

    world.services.adjudication.approve(result.claim_request_id, world.admin.id)
    stats = world.services.admin.dashboard_stats()
    assert stats.claimed_players == 1
    assert stats.pending_claims == 0

import pytest

from conftest import World, declared
from playerclaim.core.errors import ForbiddenError, InvalidInputError, NotFoundError


def _approved_owner(world: World) -> None:
    result = world.services.claims.start_claim(world.premium.id, world.player.id)
    world.services.identity.verify_identity(world.premium.id, declared())
    world.services.adjudication.approve(result.claim_request_id, world.admin.id)


def test_owner_can_edit_and_merge_custom_data(world: World) -> None:
    _approved_owner(world)
    profiles = world.services.profiles

    profiles.update_custom_data(
        world.premium.id,
        world.player.id,
        {"bio": "Box-to-box midfielder", "videos": [{"url": "https://video.example/1"}]},
    )
    updated = profiles.update_custom_data(world.premium.id, world.player.id, {"height": 181.0, "bio": None})

    assert updated.bio == "Box-to-box midfielder"
    assert updated.height == 181.0

    stored = profiles.get_custom_data(world.player.id)
    assert stored is not None
    assert stored.bio == "Box-to-box midfielder"
    assert stored.videos == [{"url": "https://video.example/1"}]
    assert stored.height == 181.0


def test_non_owner_cannot_edit(world: World) -> None:
    _approved_owner(world)
    other = world.services.directory.add_user("other@example.com", role="premium")

    with pytest.raises(ForbiddenError):
        world.services.profiles.update_custom_data(other.id, world.player.id, {"bio": "mine now"})
    assert world.services.profiles.get_custom_data(world.player.id) is None


def test_pending_claimant_and_free_user_cannot_edit(world: World) -> None:
    world.services.claims.start_claim(world.premium.id, world.player.id)
    with pytest.raises(ForbiddenError):
        world.services.profiles.update_custom_data(world.premium.id, world.player.id, {"bio": "early"})

    free = world.services.directory.add_user("free@example.com")
    with pytest.raises(ForbiddenError):
        world.services.profiles.update_custom_data(free.id, world.player.id, {"bio": "nope"})

    with pytest.raises(NotFoundError):
        world.services.profiles.update_custom_data("missing", world.player.id, {"bio": "nope"})


def test_custom_data_validation(world: World) -> None:
    _approved_owner(world)
    profiles = world.services.profiles

    with pytest.raises(InvalidInputError):
        profiles.update_custom_data(world.premium.id, world.player.id, {"nickname": "Maestro"})
    with pytest.raises(InvalidInputError):
        profiles.update_custom_data(
            world.premium.id,
            world.player.id,
            {"videos": [{"url": f"https://video.example/{i}"} for i in range(5)]},
        )
    with pytest.raises(InvalidInputError):
        profiles.update_custom_data(world.premium.id, world.player.id, {"career_history": "Bursaspor"})

"""GroupRepository tests."""

from src.mdnotes.core.models import SpecialGroup
from src.mdnotes.core.repositories import GroupRepository


async def test_ensure_special_groups_is_idempotent(test_session):
    repo = GroupRepository(test_session)

    first = await repo.ensure_special_groups()
    second = await repo.ensure_special_groups()

    assert [g.name for g in first] == ["everyone", "loggedIn"]
    assert [g.id for g in first] == [g.id for g in second]
    assert all(g.special for g in first)
    assert first[0].is_special(SpecialGroup.EVERYONE)
    assert first[1].is_special(SpecialGroup.LOGGED_IN)


async def test_get_by_names(test_session, team_group, special_groups):
    groups = await GroupRepository(test_session).get_by_names(["team", "everyone", "nope"])

    assert sorted(g.name for g in groups) == ["everyone", "team"]

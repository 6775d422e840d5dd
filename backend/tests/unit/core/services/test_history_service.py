"""HistoryService tests on SQLite in-memory."""

import pytest

from src.mdnotes.core.exceptions import NotFoundError
from src.mdnotes.core.repositories import HistoryRepository, NoteRepository
from src.mdnotes.core.services.history_service import HistoryService


@pytest.fixture
async def notes(test_session, alice):
    repo = NoteRepository(test_session)
    first = await repo.create("# First\n#work", owner_id=alice.id, alias="first")
    second = await repo.create("second", owner_id=alice.id)
    return first, second


async def test_record_visit_upserts(test_session, bob, notes):
    note, _ = notes
    service = HistoryService(test_session)

    await service.record_visit(bob.id, note.id)
    entry = await HistoryRepository(test_session).get_entry(bob.id, note.id)
    first_visit = entry.last_visited
    assert entry.last_edited is None

    await service.record_visit(bob.id, note.id, edited=True)
    entries = await HistoryRepository(test_session).list_for_user(bob.id)

    assert len(entries) == 1
    assert entries[0].last_visited >= first_visit
    assert entries[0].last_edited is not None


async def test_list_for_user_projects_note(test_session, bob, notes):
    first, second = notes
    service = HistoryService(test_session)
    await service.record_visit(bob.id, first.id)
    await service.record_visit(bob.id, second.id)

    entries = await service.list_for_user(bob.id)

    assert {e.identifier for e in entries} == {str(second.id), "first"}
    by_id = {e.note_id: e for e in entries}
    assert by_id[first.id].title == "First"
    assert by_id[first.id].tags == ["work"]


async def test_pinned_entries_come_first(test_session, bob, notes):
    first, second = notes
    service = HistoryService(test_session)
    await service.record_visit(bob.id, first.id)
    await service.record_visit(bob.id, second.id)

    pinned = await service.update_entry(bob.id, "first", pinned=True)
    entries = await service.list_for_user(bob.id)

    assert pinned.pinned is True
    assert [e.identifier for e in entries][0] == "first"


async def test_delete_entry(test_session, bob, notes):
    first, _ = notes
    service = HistoryService(test_session)
    await service.record_visit(bob.id, first.id)

    await service.delete_entry(bob.id, "first")

    assert await service.list_for_user(bob.id) == []
    with pytest.raises(NotFoundError):
        await service.delete_entry(bob.id, "first")


async def test_entries_are_per_user(test_session, bob, carol, notes):
    first, _ = notes
    service = HistoryService(test_session)
    await service.record_visit(bob.id, first.id)

    assert await service.list_for_user(carol.id) == []
    with pytest.raises(NotFoundError):
        await service.update_entry(carol.id, "first", pinned=True)

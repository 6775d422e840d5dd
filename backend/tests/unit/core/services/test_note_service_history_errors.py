"""NoteService against SQLite when the history write breaks the transaction."""

import uuid

from src.mdnotes.core.models import HistoryEntry
from src.mdnotes.core.models.base import utcnow
from src.mdnotes.core.repositories import NoteRepository
from src.mdnotes.core.services.note_service import NoteService


class FailingHistory:
    """Leaves the session needing a rollback, like a failed commit does."""

    def __init__(self, session):
        self.session = session

    async def record_visit(self, user_id, note_id, edited=False):
        # dangling note id violates the foreign key on commit
        self.session.add(HistoryEntry(user_id=user_id, note_id=uuid.uuid4(), last_visited=utcnow(), pinned=False))
        await self.session.commit()


async def test_read_survives_failed_history_commit(test_session, test_settings, alice, caplog):
    await NoteRepository(test_session).create("# Kept\nbody", owner_id=alice.id, alias="kept")
    service = NoteService(test_session, test_settings, history_service=FailingHistory(test_session))

    result = await service.get_note(alice.id, "kept")

    assert result.content == "# Kept\nbody"
    assert result.metadata.title == "Kept"
    assert result.permissions.owner == "alice"
    assert "Failed to record history" in caplog.text


async def test_update_survives_failed_history_commit(test_session, test_settings, alice):
    await NoteRepository(test_session).create("v1", owner_id=alice.id, alias="kept-update")
    service = NoteService(test_session, test_settings, history_service=FailingHistory(test_session))

    result = await service.update_note(alice.id, "kept-update", "v2")

    assert result.content == "v2"
    assert result.metadata.update_user == "alice"

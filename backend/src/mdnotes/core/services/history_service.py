"""History service implementation."""

import logging
from typing import List
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ..exceptions import NotFoundError
from ..models.base import utcnow
from ..models.history import HistoryEntry
from ..repositories.history_repository import HistoryRepository
from ..repositories.note_repository import NoteRepository
from ..schemas.history import HistoryEntryDto
from .document_metadata import extract_document_metadata
from .interfaces import IHistoryService

logger = logging.getLogger(__name__)


class HistoryService(IHistoryService):
    """Tracks which notes each user visited and edited."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.history_repo = HistoryRepository(session)
        self.note_repo = NoteRepository(session)

    async def record_visit(self, user_id: UUID, note_id: UUID, edited: bool = False) -> None:
        """Upsert the (user, note) entry.

        Runs in a savepoint so a failed write leaves the caller's transaction
        usable. Two concurrent first visits race on the unique constraint; the
        loser retries once and takes the update path.
        """
        at = utcnow()
        for attempt in range(2):
            try:
                async with self.session.begin_nested():  # savepoint
                    await self.history_repo.upsert(user_id, note_id, at, edited=edited)
                break
            except IntegrityError as e:
                if "uq_history_entries_user_note" not in str(e) or attempt == 1:
                    raise
        await self.session.commit()

    async def list_for_user(self, user_id: UUID) -> List[HistoryEntryDto]:
        entries = await self.history_repo.list_for_user(user_id)
        return [await self._to_dto(entry) for entry in entries]

    async def update_entry(self, user_id: UUID, id_or_alias: str, pinned: bool) -> HistoryEntryDto:
        entry = await self._get_entry(user_id, id_or_alias)
        entry.pinned = pinned
        await self.session.commit()
        logger.debug(f"History entry of user {user_id} for note {entry.note_id} pinned={pinned}")
        return await self._to_dto(entry)

    async def delete_entry(self, user_id: UUID, id_or_alias: str) -> None:
        entry = await self._get_entry(user_id, id_or_alias)
        await self.history_repo.delete_entry(entry)
        await self.session.commit()

    async def _get_entry(self, user_id: UUID, id_or_alias: str) -> HistoryEntry:
        note = await self.note_repo.resolve(id_or_alias)
        entry = await self.history_repo.get_entry(user_id, note.id)
        if entry is None:
            raise NotFoundError(f"No history entry for note '{id_or_alias}'", identifier=id_or_alias)
        return entry

    async def _to_dto(self, entry: HistoryEntry) -> HistoryEntryDto:
        note = entry.note
        title = None
        tags: List[str] = []
        if note.current_revision_id is not None:
            head = await self.note_repo.revisions.get_head(note)
            metadata = extract_document_metadata(head.content)
            title, tags = metadata.title, metadata.tags
        return HistoryEntryDto(
            identifier=note.public_identifier,
            note_id=note.id,
            title=title,
            tags=tags,
            last_visited=entry.last_visited,
            last_edited=entry.last_edited,
            pinned=entry.pinned,
        )

"""History repository for per-user visit records."""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from sqlalchemy import desc, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.history import HistoryEntry


class HistoryRepository:
    """Repository for history entry database operations.

    Methods flush but never commit; ``HistoryService`` owns the transaction.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_entry(self, user_id: UUID, note_id: UUID) -> Optional[HistoryEntry]:
        stmt = select(HistoryEntry).where(
            HistoryEntry.user_id == user_id, HistoryEntry.note_id == note_id
        )
        result = await self.session.execute(stmt.execution_options(populate_existing=True))
        return result.scalar_one_or_none()

    async def upsert(self, user_id: UUID, note_id: UUID, at: datetime, edited: bool = False) -> HistoryEntry:
        """Create the entry or refresh its timestamps."""
        entry = await self.get_entry(user_id, note_id)
        if entry is None:
            entry = HistoryEntry(
                user_id=user_id,
                note_id=note_id,
                last_visited=at,
                last_edited=at if edited else None,
                pinned=False,
            )
            self.session.add(entry)
        else:
            entry.touch(at, edited=edited)
        await self.session.flush()
        return entry

    async def list_for_user(self, user_id: UUID) -> List[HistoryEntry]:
        """Pinned entries first, then most recently visited."""
        stmt = (
            select(HistoryEntry)
            .where(HistoryEntry.user_id == user_id)
            .order_by(desc(HistoryEntry.pinned), desc(HistoryEntry.last_visited))
        )
        result = await self.session.execute(stmt.execution_options(populate_existing=True))
        return list(result.scalars())

    async def delete_entry(self, entry: HistoryEntry) -> None:
        await self.session.delete(entry)
        await self.session.flush()

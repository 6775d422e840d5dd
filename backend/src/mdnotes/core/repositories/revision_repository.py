"""Revision repository - the append-only content store."""

import logging
from typing import List, Optional
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..exceptions import NotFoundError
from ..models.note import Note
from ..models.revision import Revision
from ..models.user import User

logger = logging.getLogger(__name__)

# revisions.id is a 32-bit INTEGER column
MAX_REVISION_ID = 2**31 - 1


class RevisionRepository:
    """Repository for revision database operations."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def append(self, note_id: UUID, content: str, author_id: Optional[UUID] = None) -> Revision:
        """Store a new head revision and advance the note to it.

        Both writes share one transaction and the note row is locked first,
        so concurrent updates of the same note serialize in the database.
        """
        stmt = select(Note).where(Note.id == note_id).with_for_update()
        result = await self.session.execute(stmt)
        note = result.scalar_one_or_none()
        if not note:
            raise NotFoundError(f"Note '{note_id}' not found", identifier=note_id)

        revision = await self.add_to_note(note, content, author_id)
        await self.session.commit()
        logger.debug(f"Appended revision {revision.id} to note {note_id}")
        return revision

    async def add_to_note(self, note: Note, content: str, author_id: Optional[UUID] = None) -> Revision:
        """Insert a revision and move the head, without committing."""
        revision = Revision(note_id=note.id, content=content, author_id=author_id)
        self.session.add(revision)
        await self.session.flush()  # need the autoincrement id
        note.current_revision_id = revision.id
        await self.session.flush()
        return revision

    async def get(self, note_id: UUID, revision_id: int) -> Revision:
        """Get a revision of a note."""
        revision = None
        # ids outside the column range cannot exist and would fail to bind
        if 1 <= revision_id <= MAX_REVISION_ID:
            stmt = select(Revision).where(Revision.note_id == note_id, Revision.id == revision_id)
            result = await self.session.execute(stmt.execution_options(populate_existing=True))
            revision = result.scalar_one_or_none()
        if not revision:
            raise NotFoundError(
                f"Revision '{revision_id}' of note '{note_id}' not found", identifier=revision_id
            )
        return revision

    async def get_head(self, note: Note) -> Revision:
        """Get the revision the note currently points at."""
        if note.current_revision_id is None:
            raise NotFoundError(f"Note '{note.id}' has no revisions", identifier=note.id)
        return await self.get(note.id, note.current_revision_id)

    async def list_all(self, note_id: UUID) -> List[Revision]:
        """All revisions of a note, oldest first."""
        stmt = select(Revision).where(Revision.note_id == note_id).order_by(Revision.id)
        result = await self.session.execute(stmt.execution_options(populate_existing=True))
        return list(result.scalars())

    async def list_author_usernames(self, note_id: UUID) -> List[str]:
        """Usernames of everyone who authored a revision, in order of first edit."""
        stmt = (
            select(User.username, Revision.id)
            .join(Revision, Revision.author_id == User.id)
            .where(Revision.note_id == note_id)
            .order_by(Revision.id)
        )
        result = await self.session.execute(stmt)
        usernames: List[str] = []
        for username, _ in result.all():
            if username not in usernames:
                usernames.append(username)
        return usernames

    async def delete_all(self, note_id: UUID) -> int:
        """Delete every revision of a note. Caller owns the transaction."""
        result = await self.session.execute(delete(Revision).where(Revision.note_id == note_id))
        return result.rowcount or 0

"""Note repository for database operations."""

import logging
from typing import Iterable, Optional, Tuple, Union
from uuid import UUID

from sqlalchemy import delete, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ..exceptions import AliasConflictError, NotFoundError
from ..models.group import Group
from ..models.history import HistoryEntry
from ..models.note import Note
from ..models.permission import NoteGroupPermission, NoteUserPermission
from ..models.user import User
from .revision_repository import RevisionRepository

logger = logging.getLogger(__name__)


def parse_note_id(id_or_alias: str) -> Optional[UUID]:
    """Return the UUID when the identifier is UUID-shaped, else None."""
    try:
        return UUID(str(id_or_alias))
    except ValueError:
        return None


class NoteRepository:
    """Repository for note database operations.

    Owns note identity: alias uniqueness, id/alias lookup, the access list and
    the note's lifecycle. Content goes through ``RevisionRepository``.
    """

    def __init__(self, session: AsyncSession):
        self.session = session
        self.revisions = RevisionRepository(session)

    async def resolve(self, id_or_alias: str) -> Note:
        """Find a note by id or alias."""
        note_id = parse_note_id(id_or_alias)
        if note_id is not None:
            stmt = select(Note).where(or_(Note.id == note_id, Note.alias == str(id_or_alias)))
        else:
            stmt = select(Note).where(Note.alias == id_or_alias)
        result = await self.session.execute(stmt)
        note = result.scalars().first()
        if not note:
            raise NotFoundError(f"Note '{id_or_alias}' not found", identifier=id_or_alias)
        return note

    async def get_by_alias(self, alias: str) -> Optional[Note]:
        stmt = select(Note).where(Note.alias == alias)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def create(
        self,
        content: str,
        owner_id: Optional[UUID] = None,
        alias: Optional[str] = None,
        group_entries: Iterable[Tuple[Group, bool]] = (),
    ) -> Note:
        """Create a note with its first revision and initial group entries in one transaction."""
        if alias is not None and await self.get_by_alias(alias) is not None:
            raise AliasConflictError(alias)

        note = Note(alias=alias, owner_id=owner_id)
        for group, can_edit in group_entries:
            note.group_permissions.append(
                NoteGroupPermission(group=group, group_id=group.id, can_edit=can_edit)
            )
        self.session.add(note)
        try:
            await self.session.flush()
            await self.revisions.add_to_note(note, content, author_id=owner_id)
            await self.session.commit()
        except IntegrityError:
            # lost a race against another create with the same alias
            await self.session.rollback()
            if alias is not None:
                raise AliasConflictError(alias)
            raise

        await self.session.refresh(note)
        logger.info(f"Created note {note.id} (alias={alias!r})")
        return note

    async def update_content(
        self, target: Union[Note, str], content: str, author_id: Optional[UUID] = None
    ) -> Note:
        """Append a revision to a note given as a Note or an id/alias."""
        note = target if isinstance(target, Note) else await self.resolve(target)
        await self.revisions.append(note.id, content, author_id=author_id)
        return note

    async def update_permissions(
        self,
        note: Note,
        user_entries: Iterable[Tuple[User, bool]],
        group_entries: Iterable[Tuple[Group, bool]],
    ) -> Note:
        """Replace the whole access list of a note."""
        note.user_permissions.clear()
        note.group_permissions.clear()
        # old rows must be gone before re-adding the same (note, user) pairs
        await self.session.flush()

        for user, can_edit in user_entries:
            note.user_permissions.append(NoteUserPermission(user=user, user_id=user.id, can_edit=can_edit))
        for group, can_edit in group_entries:
            note.group_permissions.append(
                NoteGroupPermission(group=group, group_id=group.id, can_edit=can_edit)
            )

        await self.session.commit()
        return note

    async def delete(self, target: Union[Note, str]) -> None:
        """Delete a note, its revisions and history entries."""
        note = target if isinstance(target, Note) else await self.resolve(target)
        note_id = note.id

        note.current_revision_id = None
        await self.session.flush()
        await self.session.execute(delete(HistoryEntry).where(HistoryEntry.note_id == note_id))
        removed = await self.revisions.delete_all(note_id)
        await self.session.delete(note)
        await self.session.commit()
        logger.info(f"Deleted note {note_id} with {removed} revisions")

    async def record_view(self, note: Note) -> None:
        note.increment_view_count()
        await self.session.commit()

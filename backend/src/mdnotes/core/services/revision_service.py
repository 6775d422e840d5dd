"""Revision projections."""

from typing import List

from sqlalchemy.ext.asyncio import AsyncSession

from ..models.note import Note
from ..models.revision import Revision
from ..repositories.revision_repository import RevisionRepository
from ..schemas.revisions import RevisionDto, RevisionMetadataDto


class RevisionService:
    """Reads revisions of an already authorized note and shapes them for the API."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.revision_repo = RevisionRepository(session)

    async def list_revisions(self, note: Note) -> List[RevisionMetadataDto]:
        revisions = await self.revision_repo.list_all(note.id)
        return [self.to_metadata_dto(revision) for revision in revisions]

    async def get_revision(self, note: Note, revision_id: int) -> RevisionDto:
        revision = await self.revision_repo.get(note.id, revision_id)
        return self.to_dto(revision)

    @staticmethod
    def to_metadata_dto(revision: Revision) -> RevisionMetadataDto:
        return RevisionMetadataDto(
            id=revision.id,
            created_at=revision.created_at,
            length=revision.length,
            author_username=revision.author.username if revision.author else None,
        )

    @staticmethod
    def to_dto(revision: Revision) -> RevisionDto:
        return RevisionDto(id=revision.id, content=revision.content, created_at=revision.created_at)

"""
Service interfaces for mdnotes.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Union
from uuid import UUID

from ..schemas.common import HealthCheckResponse
from ..schemas.history import HistoryEntryDto
from ..schemas.notes import NoteDto, NoteMetadataDto
from ..schemas.permissions import PermissionsDto, PermissionsUpdateDto
from ..schemas.revisions import RevisionDto, RevisionMetadataDto


class INoteService(ABC):
    """Note operations. ``actor_id`` is None for guests."""

    @abstractmethod
    async def create_note(
        self,
        actor_id: Optional[UUID],
        text: Union[str, bytes],
        alias: Optional[str] = None,
        content_type: Optional[str] = None,
    ) -> NoteDto:
        """Create a note, optionally under an alias. Bytes are decoded as UTF-8."""
        pass

    @abstractmethod
    async def get_note(self, actor_id: Optional[UUID], id_or_alias: str) -> NoteDto:
        """Get note content, metadata and permissions."""
        pass

    @abstractmethod
    async def get_note_content(self, actor_id: Optional[UUID], id_or_alias: str) -> str:
        """Get the raw markdown of the current revision."""
        pass

    @abstractmethod
    async def get_note_metadata(self, actor_id: Optional[UUID], id_or_alias: str) -> NoteMetadataDto:
        """Get note metadata."""
        pass

    @abstractmethod
    async def update_note(
        self,
        actor_id: Optional[UUID],
        id_or_alias: str,
        text: Union[str, bytes],
        content_type: Optional[str] = None,
    ) -> NoteDto:
        """Store new content as a revision."""
        pass

    @abstractmethod
    async def delete_note(self, actor_id: Optional[UUID], id_or_alias: str) -> None:
        """Delete note with all revisions."""
        pass

    @abstractmethod
    async def update_permissions(
        self, actor_id: Optional[UUID], id_or_alias: str, request: PermissionsUpdateDto
    ) -> PermissionsDto:
        """Replace the note's access list."""
        pass

    @abstractmethod
    async def list_revisions(self, actor_id: Optional[UUID], id_or_alias: str) -> List[RevisionMetadataDto]:
        """List revisions, oldest first."""
        pass

    @abstractmethod
    async def get_revision(self, actor_id: Optional[UUID], id_or_alias: str, revision_id: int) -> RevisionDto:
        """Get one revision."""
        pass


class IHistoryService(ABC):
    """Per-user visit history."""

    @abstractmethod
    async def record_visit(self, user_id: UUID, note_id: UUID, edited: bool = False) -> None:
        """Upsert the user's entry for the note."""
        pass

    @abstractmethod
    async def list_for_user(self, user_id: UUID) -> List[HistoryEntryDto]:
        """List history entries."""
        pass

    @abstractmethod
    async def update_entry(self, user_id: UUID, id_or_alias: str, pinned: bool) -> HistoryEntryDto:
        """Pin or unpin an entry."""
        pass

    @abstractmethod
    async def delete_entry(self, user_id: UUID, id_or_alias: str) -> None:
        """Remove an entry."""
        pass


class IHealthService(ABC):
    """Health check service."""

    @abstractmethod
    async def get_health_status(self) -> HealthCheckResponse:
        """Get app health status."""
        pass

    @abstractmethod
    async def check_database_health(self) -> Dict[str, Any]:
        """Check DB connection."""
        pass

    @abstractmethod
    async def check_redis_health(self) -> Dict[str, Any]:
        """Check Redis connection."""
        pass

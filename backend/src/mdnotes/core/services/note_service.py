"""Note service implementation.

Every operation runs in the same order: resolve the note, resolve the actor
and check the permission against the current note state, perform the read or
mutation, record history for authenticated actors, then project to DTOs.
Nothing is written before the permission check passes.
"""

import logging
import re
from typing import Callable, List, Optional, Tuple, Union
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from ...config import Settings, get_settings
from ..exceptions import AuthorizationDeniedError, InvalidInputError, NotFoundError
from ..models.group import Group, SpecialGroup
from ..models.note import Note
from ..models.revision import Revision
from ..models.user import User
from ..repositories.group_repository import GroupRepository
from ..repositories.note_repository import NoteRepository, parse_note_id
from ..repositories.revision_repository import RevisionRepository
from ..repositories.user_repository import UserRepository
from ..schemas.notes import NoteDto, NoteMetadataDto
from ..schemas.permissions import (
    NoteGroupPermissionEntry,
    NoteUserPermissionEntry,
    PermissionsDto,
    PermissionsUpdateDto,
)
from ..schemas.revisions import RevisionDto, RevisionMetadataDto
from .document_metadata import extract_document_metadata
from .history_service import HistoryService
from .interfaces import IHistoryService, INoteService
from .permission_service import PermissionService
from .revision_service import RevisionService

logger = logging.getLogger(__name__)

ALIAS_PATTERN = re.compile(r"^[A-Za-z0-9_.~-]{1,64}$")
MARKDOWN_CONTENT_TYPES = ("text/markdown", "text/plain")


class NoteService(INoteService):
    """Note service implementation."""

    def __init__(
        self,
        session: AsyncSession,
        settings: Optional[Settings] = None,
        history_service: Optional[IHistoryService] = None,
    ):
        self.session = session
        self.settings = settings or get_settings()
        self.note_repo = NoteRepository(session)
        self.revision_repo = RevisionRepository(session)
        self.user_repo = UserRepository(session)
        self.group_repo = GroupRepository(session)
        self.revision_service = RevisionService(session)
        self.history_service = history_service or HistoryService(session)
        self.permissions = PermissionService(self.settings.guest_access)

    async def create_note(
        self,
        actor_id: Optional[UUID],
        text: Union[str, bytes],
        alias: Optional[str] = None,
        content_type: Optional[str] = None,
    ) -> NoteDto:
        """Create a note owned by the actor.

        Guest notes have no owner, so they are opened to ``everyone`` for
        editing; otherwise nobody could reach them again.
        """
        actor = await self._resolve_actor(actor_id, "create")
        if not self.permissions.may_create(actor):
            raise AuthorizationDeniedError("create", anonymous=actor is None)

        text = self._read_markdown(text, content_type)
        self._validate_content(text)
        if alias is not None:
            self._validate_alias(alias)

        group_entries: List[Tuple[Group, bool]] = []
        if actor is None:
            everyone = await self.group_repo.get_by_name(SpecialGroup.EVERYONE.value)
            if everyone is None:
                raise NotFoundError(
                    "Special group 'everyone' is missing", identifier=SpecialGroup.EVERYONE.value
                )
            group_entries.append((everyone, True))

        note = await self.note_repo.create(
            text, owner_id=actor.id if actor else None, alias=alias, group_entries=group_entries
        )
        head = await self.revision_repo.get_head(note)
        return await self._to_note_dto(note, head)

    async def get_note(self, actor_id: Optional[UUID], id_or_alias: str) -> NoteDto:
        note, actor = await self._authorize(actor_id, id_or_alias, "read", self.permissions.may_read)
        await self.note_repo.record_view(note)
        await self._record_history(actor, note)
        head = await self.revision_repo.get_head(note)
        return await self._to_note_dto(note, head)

    async def get_note_content(self, actor_id: Optional[UUID], id_or_alias: str) -> str:
        note, actor = await self._authorize(actor_id, id_or_alias, "read", self.permissions.may_read)
        await self._record_history(actor, note)
        head = await self.revision_repo.get_head(note)
        return head.content

    async def get_note_metadata(self, actor_id: Optional[UUID], id_or_alias: str) -> NoteMetadataDto:
        note, actor = await self._authorize(actor_id, id_or_alias, "read", self.permissions.may_read)
        await self._record_history(actor, note)
        head = await self.revision_repo.get_head(note)
        return await self._to_metadata_dto(note, head)

    async def update_note(
        self,
        actor_id: Optional[UUID],
        id_or_alias: str,
        text: Union[str, bytes],
        content_type: Optional[str] = None,
    ) -> NoteDto:
        """Append the text as a new revision."""
        note, actor = await self._authorize(actor_id, id_or_alias, "write", self.permissions.may_write)
        text = self._read_markdown(text, content_type)
        self._validate_content(text)

        await self.note_repo.update_content(note, text, author_id=actor.id if actor else None)
        logger.info(f"Note {note.id} updated by {actor.username if actor else 'guest'}")

        await self._record_history(actor, note, edited=True)
        head = await self.revision_repo.get_head(note)
        return await self._to_note_dto(note, head)

    async def delete_note(self, actor_id: Optional[UUID], id_or_alias: str) -> None:
        note, _ = await self._authorize(actor_id, id_or_alias, "delete", self.permissions.is_owner)
        await self.note_repo.delete(note)

    async def update_permissions(
        self, actor_id: Optional[UUID], id_or_alias: str, request: PermissionsUpdateDto
    ) -> PermissionsDto:
        """Replace the access list. Only the owner may do this."""
        note, _ = await self._authorize(
            actor_id, id_or_alias, "update permissions", self.permissions.is_owner
        )
        user_entries, group_entries = await self._resolve_access_list(request)

        await self.note_repo.update_permissions(note, user_entries, group_entries)
        logger.info(
            f"Permissions of note {note.id} replaced: "
            f"{len(user_entries)} user and {len(group_entries)} group entries"
        )
        return self._to_permissions_dto(note)

    async def list_revisions(self, actor_id: Optional[UUID], id_or_alias: str) -> List[RevisionMetadataDto]:
        note, actor = await self._authorize(actor_id, id_or_alias, "read", self.permissions.may_read)
        revisions = await self.revision_service.list_revisions(note)
        await self._record_history(actor, note)
        return revisions

    async def get_revision(self, actor_id: Optional[UUID], id_or_alias: str, revision_id: int) -> RevisionDto:
        note, actor = await self._authorize(actor_id, id_or_alias, "read", self.permissions.may_read)
        revision = await self.revision_service.get_revision(note, revision_id)
        await self._record_history(actor, note)
        return revision

    async def _resolve_actor(self, actor_id: Optional[UUID], action: str) -> Optional[User]:
        if actor_id is None:
            return None
        actor = await self.user_repo.get_by_id(actor_id)
        if actor is None:
            # a valid token for a user we do not know grants nothing
            logger.warning(f"Unknown actor {actor_id} tried to {action}")
            raise AuthorizationDeniedError(action)
        return actor

    async def _authorize(
        self,
        actor_id: Optional[UUID],
        id_or_alias: str,
        action: str,
        check: Callable[[Optional[User], Note], bool],
    ) -> Tuple[Note, Optional[User]]:
        note = await self.note_repo.resolve(id_or_alias)
        actor = await self._resolve_actor(actor_id, action)
        if not check(actor, note):
            logger.debug(f"{action} of note {note.id} denied for {actor_id or 'guest'}")
            raise AuthorizationDeniedError(action, identifier=id_or_alias, anonymous=actor is None)
        return note, actor

    async def _record_history(self, actor: Optional[User], note: Note, edited: bool = False) -> None:
        if actor is None:
            return
        try:
            await self.history_service.record_visit(actor.id, note.id, edited=edited)
        except Exception:
            logger.warning(f"Failed to record history of note {note.id} for {actor.id}", exc_info=True)
            # the session must stay usable for projecting the result
            await self.session.rollback()
            await self.session.refresh(note)

    def _read_markdown(self, body: Union[str, bytes], content_type: Optional[str]) -> str:
        """Check the body's media type and decode it.

        Called after authorization, so unauthorized callers get 401/403
        whatever they sent.
        """
        if content_type is not None:
            media_type = content_type.split(";")[0].strip().lower()
            if media_type not in MARKDOWN_CONTENT_TYPES:
                raise InvalidInputError(f"Expected a text/markdown body, got '{media_type or 'nothing'}'")
        if isinstance(body, bytes):
            try:
                return body.decode("utf-8")
            except UnicodeDecodeError:
                raise InvalidInputError("Note body must be UTF-8 encoded")
        return body

    def _validate_content(self, text: str) -> None:
        if len(text) > self.settings.max_document_length:
            raise InvalidInputError(
                f"Note is longer than {self.settings.max_document_length} characters"
            )

    def _validate_alias(self, alias: str) -> None:
        if not ALIAS_PATTERN.match(alias):
            raise InvalidInputError(f"Alias '{alias}' contains invalid characters", identifier=alias)
        if parse_note_id(alias) is not None:
            raise InvalidInputError(f"Alias '{alias}' must not look like a note id", identifier=alias)
        if alias.lower() in {a.lower() for a in self.settings.forbidden_aliases}:
            raise InvalidInputError(f"Alias '{alias}' is reserved", identifier=alias)

    async def _resolve_access_list(
        self, request: PermissionsUpdateDto
    ) -> Tuple[List[Tuple[User, bool]], List[Tuple[Group, bool]]]:
        usernames = [entry.username for entry in request.shared_to_users]
        groupnames = [entry.groupname for entry in request.shared_to_groups]
        if len(usernames) != len(set(usernames)):
            raise InvalidInputError("A user may appear only once in the access list")
        if len(groupnames) != len(set(groupnames)):
            raise InvalidInputError("A group may appear only once in the access list")

        users = {user.username: user for user in await self.user_repo.get_by_usernames(usernames)}
        groups = {group.name: group for group in await self.group_repo.get_by_names(groupnames)}

        missing_users = [name for name in usernames if name not in users]
        if missing_users:
            raise NotFoundError(f"Unknown user '{missing_users[0]}'", identifier=missing_users[0])
        missing_groups = [name for name in groupnames if name not in groups]
        if missing_groups:
            raise NotFoundError(f"Unknown group '{missing_groups[0]}'", identifier=missing_groups[0])

        user_entries = [(users[e.username], e.can_edit) for e in request.shared_to_users]
        group_entries = [(groups[e.groupname], e.can_edit) for e in request.shared_to_groups]
        return user_entries, group_entries

    def _to_permissions_dto(self, note: Note) -> PermissionsDto:
        return PermissionsDto(
            owner=note.owner.username if note.owner else None,
            shared_to_users=[
                NoteUserPermissionEntry(user=entry.user.username, can_edit=entry.can_edit)
                for entry in note.user_permissions
            ],
            shared_to_groups=[
                NoteGroupPermissionEntry(group=entry.group.name, can_edit=entry.can_edit)
                for entry in note.group_permissions
            ],
        )

    async def _to_metadata_dto(self, note: Note, head: Revision) -> NoteMetadataDto:
        metadata = extract_document_metadata(head.content)
        edited_by = await self.revision_repo.list_author_usernames(note.id)
        return NoteMetadataDto(
            id=note.id,
            alias=note.alias,
            title=metadata.title,
            description=metadata.description,
            tags=metadata.tags,
            create_time=note.created_at,
            update_time=head.created_at,
            update_user=head.author.username if head.author else None,
            view_count=note.view_count or 0,
            edited_by=edited_by,
            permissions=self._to_permissions_dto(note),
        )

    async def _to_note_dto(self, note: Note, head: Revision) -> NoteDto:
        metadata = await self._to_metadata_dto(note, head)
        return NoteDto(
            id=note.id,
            alias=note.alias,
            content=head.content,
            metadata=metadata,
            permissions=metadata.permissions,
        )

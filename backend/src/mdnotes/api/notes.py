"""Notes API endpoints.

Note bodies are sent as raw markdown (``text/markdown`` or ``text/plain``),
everything else is JSON.
"""

from typing import List, NamedTuple, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import PlainTextResponse
from sqlalchemy.ext.asyncio import AsyncSession

from ..config import Settings, get_settings
from ..core.schemas.notes import NoteDto, NoteMetadataDto
from ..core.schemas.permissions import PermissionsDto, PermissionsUpdateDto
from ..core.schemas.revisions import RevisionDto, RevisionMetadataDto
from ..core.services import NoteService
from ..database import get_db_session
from ..middleware.auth import get_optional_user_id

router = APIRouter(prefix="/notes", tags=["notes"])


class MarkdownBody(NamedTuple):
    """Raw request body; the service checks the media type after authorization."""

    data: bytes
    content_type: str


async def markdown_body(request: Request) -> MarkdownBody:
    return MarkdownBody(await request.body(), request.headers.get("content-type", ""))


def get_note_service(
    session: AsyncSession = Depends(get_db_session),
    settings: Settings = Depends(get_settings),
) -> NoteService:
    return NoteService(session, settings)


@router.post("", response_model=NoteDto, status_code=201)
async def create_note(
    body: MarkdownBody = Depends(markdown_body),
    current_user_id: Optional[UUID] = Depends(get_optional_user_id),
    note_service: NoteService = Depends(get_note_service),
):
    """Create a new note with a generated id."""
    return await note_service.create_note(current_user_id, body.data, content_type=body.content_type)


@router.post("/{alias}", response_model=NoteDto, status_code=201)
async def create_named_note(
    alias: str,
    body: MarkdownBody = Depends(markdown_body),
    current_user_id: Optional[UUID] = Depends(get_optional_user_id),
    note_service: NoteService = Depends(get_note_service),
):
    """Create a new note reachable under the given alias."""
    return await note_service.create_note(current_user_id, body.data, alias=alias, content_type=body.content_type)


@router.get("/{note}", response_model=NoteDto)
async def get_note(
    note: str,
    current_user_id: Optional[UUID] = Depends(get_optional_user_id),
    note_service: NoteService = Depends(get_note_service),
):
    """Get a note by id or alias."""
    return await note_service.get_note(current_user_id, note)


@router.put("/{note}", response_model=NoteDto)
async def update_note(
    note: str,
    body: MarkdownBody = Depends(markdown_body),
    current_user_id: Optional[UUID] = Depends(get_optional_user_id),
    note_service: NoteService = Depends(get_note_service),
):
    """Replace the note content, creating a new revision."""
    return await note_service.update_note(current_user_id, note, body.data, content_type=body.content_type)


@router.delete("/{note}", status_code=204)
async def delete_note(
    note: str,
    current_user_id: Optional[UUID] = Depends(get_optional_user_id),
    note_service: NoteService = Depends(get_note_service),
):
    """Delete a note and all of its revisions."""
    await note_service.delete_note(current_user_id, note)
    return Response(status_code=204)


@router.get("/{note}/content", response_class=PlainTextResponse)
async def get_note_content(
    note: str,
    current_user_id: Optional[UUID] = Depends(get_optional_user_id),
    note_service: NoteService = Depends(get_note_service),
):
    """Get the raw markdown of the current revision."""
    content = await note_service.get_note_content(current_user_id, note)
    return PlainTextResponse(content, media_type="text/markdown")


@router.get("/{note}/metadata", response_model=NoteMetadataDto)
async def get_note_metadata(
    note: str,
    current_user_id: Optional[UUID] = Depends(get_optional_user_id),
    note_service: NoteService = Depends(get_note_service),
):
    return await note_service.get_note_metadata(current_user_id, note)


@router.put("/{note}/metadata/permissions", response_model=PermissionsDto)
async def update_note_permissions(
    note: str,
    request: PermissionsUpdateDto,
    current_user_id: Optional[UUID] = Depends(get_optional_user_id),
    note_service: NoteService = Depends(get_note_service),
):
    """Replace the access list. Entries not in the request lose access."""
    return await note_service.update_permissions(current_user_id, note, request)


@router.get("/{note}/revisions", response_model=List[RevisionMetadataDto])
async def list_note_revisions(
    note: str,
    current_user_id: Optional[UUID] = Depends(get_optional_user_id),
    note_service: NoteService = Depends(get_note_service),
):
    """List revisions, oldest first."""
    return await note_service.list_revisions(current_user_id, note)


@router.get("/{note}/revisions/{revision_id}", response_model=RevisionDto)
async def get_note_revision(
    note: str,
    revision_id: int,
    current_user_id: Optional[UUID] = Depends(get_optional_user_id),
    note_service: NoteService = Depends(get_note_service),
):
    return await note_service.get_revision(current_user_id, note, revision_id)

"""History API endpoints for the current user."""

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.schemas.history import HistoryEntryDto, HistoryEntryUpdateDto
from ..core.services import HistoryService
from ..database import get_db_session
from ..middleware.auth import get_current_user_id

router = APIRouter(prefix="/me/history", tags=["history"])


@router.get("", response_model=List[HistoryEntryDto])
async def list_history(
    current_user_id: UUID = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_db_session),
):
    """Notes the user visited, pinned first."""
    history_service = HistoryService(session)
    return await history_service.list_for_user(current_user_id)


@router.put("/{note}", response_model=HistoryEntryDto)
async def update_history_entry(
    note: str,
    request: HistoryEntryUpdateDto,
    current_user_id: UUID = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_db_session),
):
    """Pin or unpin a history entry."""
    history_service = HistoryService(session)
    return await history_service.update_entry(current_user_id, note, request.pinned)


@router.delete("/{note}", status_code=204)
async def delete_history_entry(
    note: str,
    current_user_id: UUID = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_db_session),
):
    history_service = HistoryService(session)
    await history_service.delete_entry(current_user_id, note)
    return Response(status_code=204)

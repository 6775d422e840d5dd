"""
History schemas.
"""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import Field

from .common import CamelModel


class HistoryEntryDto(CamelModel):
    """A note the user visited."""

    identifier: str = Field(description="Alias when set, id otherwise")
    note_id: UUID
    title: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    last_visited: datetime
    last_edited: Optional[datetime] = None
    pinned: bool = False


class HistoryEntryUpdateDto(CamelModel):
    pinned: bool

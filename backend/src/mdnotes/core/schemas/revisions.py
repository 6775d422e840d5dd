"""
Revision schemas.
"""

from datetime import datetime
from typing import Optional

from pydantic import Field

from .common import CamelModel


class RevisionMetadataDto(CamelModel):
    id: int
    created_at: datetime
    length: int = Field(description="Content length in characters")
    author_username: Optional[str] = Field(default=None, description="Null for guest edits")


class RevisionDto(CamelModel):
    id: int
    content: str
    created_at: datetime

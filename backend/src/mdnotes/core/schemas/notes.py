"""
Note schemas.

Metadata fields (title, description, tags) are derived from the note content
and are read-only.
"""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import ConfigDict, Field

from .common import CamelModel
from .permissions import PermissionsDto


class NoteMetadataDto(CamelModel):
    """Note metadata as exposed by the API."""

    id: UUID
    alias: Optional[str] = None
    title: Optional[str] = Field(default=None, description="Front matter title or first heading")
    description: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    create_time: datetime
    update_time: datetime
    update_user: Optional[str] = Field(default=None, description="Author of the current revision")
    view_count: int = 0
    edited_by: List[str] = Field(default_factory=list, description="Usernames of all revision authors")
    permissions: PermissionsDto

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": "123e4567-e89b-12d3-a456-426614174000",
                "alias": "meeting-notes",
                "title": "Q4 Planning",
                "description": None,
                "tags": ["meeting", "planning"],
                "createTime": "2025-09-13T10:30:00Z",
                "updateTime": "2025-09-13T11:00:00Z",
                "updateUser": "alice",
                "viewCount": 3,
                "editedBy": ["alice", "bob"],
                "permissions": {
                    "owner": "alice",
                    "sharedToUsers": [{"user": "bob", "canEdit": True}],
                    "sharedToGroups": [{"group": "everyone", "canEdit": False}],
                },
            }
        }
    )


class NoteDto(CamelModel):
    """Full note: current content plus metadata."""

    id: UUID
    alias: Optional[str] = None
    content: str
    metadata: NoteMetadataDto
    permissions: PermissionsDto

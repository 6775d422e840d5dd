"""
Access list schemas.
"""

from typing import List, Optional

from pydantic import Field

from .common import CamelModel


class NoteUserPermissionEntry(CamelModel):
    user: str = Field(description="Username")
    can_edit: bool = Field(default=False)


class NoteGroupPermissionEntry(CamelModel):
    group: str = Field(description="Group name")
    can_edit: bool = Field(default=False)


class PermissionsDto(CamelModel):
    """Current owner and access list of a note."""

    owner: Optional[str] = Field(default=None, description="Owner username, null for guest notes")
    shared_to_users: List[NoteUserPermissionEntry] = Field(default_factory=list)
    shared_to_groups: List[NoteGroupPermissionEntry] = Field(default_factory=list)


class NoteUserPermissionUpdate(CamelModel):
    username: str = Field(min_length=1)
    can_edit: bool = Field(default=False)


class NoteGroupPermissionUpdate(CamelModel):
    groupname: str = Field(min_length=1)
    can_edit: bool = Field(default=False)


class PermissionsUpdateDto(CamelModel):
    """Replacement access list. Entries not listed lose their access."""

    shared_to_users: List[NoteUserPermissionUpdate] = Field(default_factory=list)
    shared_to_groups: List[NoteGroupPermissionUpdate] = Field(default_factory=list)

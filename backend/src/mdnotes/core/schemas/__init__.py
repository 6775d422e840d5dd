"""
Pydantic schemas for validating and documenting API requests and responses.

Payloads use camelCase on the wire (see ``CamelModel``); error and health
responses keep their snake_case shape.
"""

from .common import CamelModel, ErrorResponse, HealthCheckResponse
from .history import HistoryEntryDto, HistoryEntryUpdateDto
from .notes import NoteDto, NoteMetadataDto
from .permissions import (
    NoteGroupPermissionEntry,
    NoteGroupPermissionUpdate,
    NoteUserPermissionEntry,
    NoteUserPermissionUpdate,
    PermissionsDto,
    PermissionsUpdateDto,
)
from .revisions import RevisionDto, RevisionMetadataDto

__all__ = [
    "CamelModel",
    "ErrorResponse",
    "HealthCheckResponse",
    # Notes
    "NoteDto",
    "NoteMetadataDto",
    # Permissions
    "PermissionsDto",
    "PermissionsUpdateDto",
    "NoteUserPermissionEntry",
    "NoteGroupPermissionEntry",
    "NoteUserPermissionUpdate",
    "NoteGroupPermissionUpdate",
    # Revisions
    "RevisionMetadataDto",
    "RevisionDto",
    # History
    "HistoryEntryDto",
    "HistoryEntryUpdateDto",
]

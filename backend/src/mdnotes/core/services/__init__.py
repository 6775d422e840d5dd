"""Business logic services."""

from .document_metadata import DocumentMetadata, extract_document_metadata
from .health_service import HealthService
from .history_service import HistoryService
from .note_service import NoteService
from .permission_service import PermissionService
from .revision_service import RevisionService

__all__ = [
    "DocumentMetadata",
    "extract_document_metadata",
    "HealthService",
    "HistoryService",
    "NoteService",
    "PermissionService",
    "RevisionService",
]

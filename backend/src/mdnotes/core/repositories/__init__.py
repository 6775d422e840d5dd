"""Repository layer for data access."""

from .group_repository import GroupRepository
from .history_repository import HistoryRepository
from .note_repository import NoteRepository
from .revision_repository import RevisionRepository
from .user_repository import UserRepository

__all__ = [
    "UserRepository",
    "GroupRepository",
    "NoteRepository",
    "RevisionRepository",
    "HistoryRepository",
]

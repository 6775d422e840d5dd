"""
Database models for mdnotes.

SQLAlchemy ORM models for the collaborative markdown note service. All models
are used through async sessions.

Models included:
    - User: identity reference provisioned by the identity provider
    - Group: named user sets plus the special everyone / loggedIn groups
    - Note: document addressable by id or alias, pointing at its head revision
    - Revision: immutable full-content snapshot of a note
    - NoteUserPermission / NoteGroupPermission: the note's access list
    - HistoryEntry: per-user visit/edit record
"""

from .base import BaseModel
from .group import Group, SpecialGroup, group_members
from .history import HistoryEntry
from .note import Note
from .permission import NoteGroupPermission, NoteUserPermission
from .revision import Revision
from .user import User

__all__ = [
    "BaseModel",
    "User",
    "Group",
    "SpecialGroup",
    "group_members",
    "Note",
    "Revision",
    "NoteUserPermission",
    "NoteGroupPermission",
    "HistoryEntry",
]

# Access list entries for notes
import uuid
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, ForeignKey, Index, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import BaseModel
from .types import GUID

if TYPE_CHECKING:
    from .group import Group
    from .note import Note
    from .user import User


class NoteUserPermission(BaseModel):
    """Grants one user read (and optionally edit) access to a note."""

    __tablename__ = "note_user_permissions"

    note_id: Mapped[uuid.UUID] = mapped_column(
        GUID(), ForeignKey("notes.id", ondelete="CASCADE"), nullable=False
    )
    # removing the user drops the grant, never the note
    user_id: Mapped[uuid.UUID] = mapped_column(
        GUID(), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    can_edit: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    note: Mapped["Note"] = relationship("Note", back_populates="user_permissions")
    user: Mapped["User"] = relationship("User", lazy="selectin")

    __table_args__ = (
        UniqueConstraint("note_id", "user_id", name="uq_note_user_permissions_note_user"),
        Index("idx_note_user_permissions_user_id", "user_id"),
    )

    def __repr__(self) -> str:
        return f"<NoteUserPermission(note_id={self.note_id}, user_id={self.user_id}, can_edit={self.can_edit})>"


class NoteGroupPermission(BaseModel):
    """Grants a group read (and optionally edit) access to a note."""

    __tablename__ = "note_group_permissions"

    note_id: Mapped[uuid.UUID] = mapped_column(
        GUID(), ForeignKey("notes.id", ondelete="CASCADE"), nullable=False
    )
    group_id: Mapped[uuid.UUID] = mapped_column(
        GUID(), ForeignKey("groups.id", ondelete="CASCADE"), nullable=False
    )
    can_edit: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    note: Mapped["Note"] = relationship("Note", back_populates="group_permissions")
    group: Mapped["Group"] = relationship("Group", lazy="selectin")

    __table_args__ = (
        UniqueConstraint("note_id", "group_id", name="uq_note_group_permissions_note_group"),
        Index("idx_note_group_permissions_group_id", "group_id"),
    )

    def __repr__(self) -> str:
        return f"<NoteGroupPermission(note_id={self.note_id}, group_id={self.group_id}, can_edit={self.can_edit})>"

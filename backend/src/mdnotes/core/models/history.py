# Per-user note visit history
import uuid
from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import BaseModel, utcnow
from .types import GUID

if TYPE_CHECKING:
    from .note import Note


class HistoryEntry(BaseModel):
    """Records when a user last visited or edited a note.

    Independent from the note's revision history; one row per (user, note).
    """

    __tablename__ = "history_entries"

    user_id: Mapped[uuid.UUID] = mapped_column(
        GUID(), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    note_id: Mapped[uuid.UUID] = mapped_column(
        GUID(), ForeignKey("notes.id", ondelete="CASCADE"), nullable=False
    )

    last_visited: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )
    last_edited: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    pinned: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    note: Mapped["Note"] = relationship("Note", lazy="selectin")

    __table_args__ = (
        UniqueConstraint("user_id", "note_id", name="uq_history_entries_user_note"),
        Index("idx_history_entries_user_id", "user_id"),
        Index("idx_history_entries_note_id", "note_id"),
    )

    def __repr__(self) -> str:
        return f"<HistoryEntry(user_id={self.user_id}, note_id={self.note_id}, pinned={self.pinned})>"

    def touch(self, at: datetime, edited: bool = False) -> None:
        """Refresh timestamps for a new visit (and edit)."""
        self.last_visited = at
        if edited:
            self.last_edited = at

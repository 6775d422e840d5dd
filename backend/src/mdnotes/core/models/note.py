# Note model - the versioned markdown document
import uuid
from datetime import datetime, timezone
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import BaseModel
from .types import GUID

if TYPE_CHECKING:
    from .permission import NoteGroupPermission, NoteUserPermission
    from .user import User


class Note(BaseModel):
    """Note addressable by id or alias.

    Content lives in revisions. ``current_revision_id`` is an explicit key into
    the ``revisions`` table rather than an ORM back-reference, so deleting a
    note never leaves a dangling in-memory pointer.
    """

    __tablename__ = "notes"

    alias: Mapped[Optional[str]] = mapped_column(String(64), unique=True, nullable=True)

    # owner reference; NULL for guest-created notes or after the owner was removed
    owner_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        GUID(), ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )

    # nullable only so the note row can be inserted before its first revision
    # inside the creating transaction
    current_revision_id: Mapped[Optional[int]] = mapped_column(
        Integer,
        ForeignKey("revisions.id", ondelete="SET NULL", use_alter=True, name="fk_notes_current_revision"),
        nullable=True,
    )

    view_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    last_viewed_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    owner: Mapped[Optional["User"]] = relationship("User", lazy="selectin")

    user_permissions: Mapped[List["NoteUserPermission"]] = relationship(
        "NoteUserPermission",
        back_populates="note",
        cascade="all, delete-orphan",
        lazy="selectin",
        doc="Per-user access list entries",
    )

    group_permissions: Mapped[List["NoteGroupPermission"]] = relationship(
        "NoteGroupPermission",
        back_populates="note",
        cascade="all, delete-orphan",
        lazy="selectin",
        doc="Per-group access list entries (special groups included)",
    )

    __table_args__ = (
        CheckConstraint("alias IS NULL OR length(alias) <= 64", name="ck_notes_alias_len"),
        Index("idx_notes_owner_id", "owner_id"),
        Index("idx_notes_alias", "alias"),
    )

    def __repr__(self) -> str:
        return f"<Note(id={self.id}, alias={self.alias!r}, owner_id={self.owner_id})>"

    @property
    def public_identifier(self) -> str:
        """Alias when set, id otherwise."""
        return self.alias or str(self.id)

    def increment_view_count(self) -> None:
        """
        Increment the view count and update last viewed timestamp.

        Changes are pending until the session is committed.
        """
        self.view_count = (self.view_count or 0) + 1
        self.last_viewed_at = datetime.now(timezone.utc)

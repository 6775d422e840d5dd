# Immutable content snapshots
import uuid
from typing import TYPE_CHECKING, Optional

from sqlalchemy import ForeignKey, Index, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import BaseModel
from .types import GUID

if TYPE_CHECKING:
    from .user import User


class Revision(BaseModel):
    """Full markdown snapshot of a note at one point in time.

    Revisions are append-only: nothing updates a row after insert. Ids are
    integers so ascending id order is creation order.
    """

    __tablename__ = "revisions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    note_id: Mapped[uuid.UUID] = mapped_column(
        GUID(), ForeignKey("notes.id", ondelete="CASCADE"), nullable=False
    )
    author_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        GUID(), ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )

    content: Mapped[str] = mapped_column(Text, nullable=False)
    length: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    author: Mapped[Optional["User"]] = relationship("User", lazy="selectin")

    __table_args__ = (
        Index("idx_revisions_note_id", "note_id"),
        Index("idx_revisions_note_id_id", "note_id", "id"),
    )

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        if self.content is not None:
            self.length = len(self.content)

    def __repr__(self) -> str:
        return f"<Revision(id={self.id}, note_id={self.note_id}, length={self.length})>"

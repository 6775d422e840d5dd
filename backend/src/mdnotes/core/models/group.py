# User groups, including the two special visibility groups
from enum import Enum

from sqlalchemy import Boolean, Column, ForeignKey, Index, String, Table
from sqlalchemy.orm import Mapped, mapped_column

from .base import BaseModel
from .types import GUID


class SpecialGroup(str, Enum):
    """Groups whose membership is implicit."""

    EVERYONE = "everyone"  # every actor, guests included
    LOGGED_IN = "loggedIn"  # every authenticated actor

    @property
    def display_name(self) -> str:
        return {"everyone": "Everyone", "loggedIn": "Logged-in users"}[self.value]


group_members = Table(
    "group_members",
    BaseModel.metadata,
    Column("group_id", GUID(), ForeignKey("groups.id", ondelete="CASCADE"), primary_key=True),
    Column("user_id", GUID(), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
)


class Group(BaseModel):
    """Named set of users that can be granted access to notes."""

    __tablename__ = "groups"

    name: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)
    display_name: Mapped[str] = mapped_column(String(128), nullable=False)
    special: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    __table_args__ = (Index("idx_groups_name", "name"),)

    def __repr__(self) -> str:
        return f"<Group(name='{self.name}', special={self.special})>"

    def is_special(self, which: SpecialGroup) -> bool:
        return bool(self.special) and self.name == which.value

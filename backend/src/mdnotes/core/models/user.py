"""
User model.

Users are provisioned by the external identity provider; this service only
references them by id and shows their public profile on notes.
"""

from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import CheckConstraint, Index, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import BaseModel

if TYPE_CHECKING:
    from .group import Group


class User(BaseModel):
    """Identity reference with public profile fields."""

    __tablename__ = "users"

    username: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)
    display_name: Mapped[str] = mapped_column(String(128), nullable=False)
    email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    photo: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)

    # group membership drives group-based note permissions
    groups: Mapped[List["Group"]] = relationship(
        "Group",
        secondary="group_members",
        lazy="selectin",
    )

    __table_args__ = (
        CheckConstraint("length(username) <= 64", name="ck_users_username_len"),
        Index("idx_users_username", "username"),
    )

    def __repr__(self) -> str:
        return f"<User(username='{self.username}')>"

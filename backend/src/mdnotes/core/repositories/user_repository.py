"""User repository for database operations."""

from typing import List, Optional, Sequence
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.user import User


class UserRepository:
    """Read access to identity references.

    Users are provisioned by the identity provider and only read here.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, user_id: UUID) -> Optional[User]:
        """Get user by ID."""
        stmt = select(User).where(User.id == user_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_usernames(self, usernames: Sequence[str]) -> List[User]:
        if not usernames:
            return []
        stmt = select(User).where(User.username.in_(list(usernames)))
        result = await self.session.execute(stmt)
        return list(result.scalars())

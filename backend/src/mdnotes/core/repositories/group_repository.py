"""Group repository for database operations."""

import logging
from typing import List, Optional, Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.group import Group, SpecialGroup

logger = logging.getLogger(__name__)


class GroupRepository:
    """Repository for group database operations."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_name(self, name: str) -> Optional[Group]:
        stmt = select(Group).where(Group.name == name)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_names(self, names: Sequence[str]) -> List[Group]:
        if not names:
            return []
        stmt = select(Group).where(Group.name.in_(list(names)))
        result = await self.session.execute(stmt)
        return list(result.scalars())

    async def ensure_special_groups(self) -> List[Group]:
        """Create the everyone / loggedIn groups if they are missing.

        Safe to call on every startup.
        """
        groups = []
        created = False
        for special in SpecialGroup:
            group = await self.get_by_name(special.value)
            if group is None:
                group = Group(name=special.value, display_name=special.display_name, special=True)
                self.session.add(group)
                created = True
                logger.info(f"Created special group '{special.value}'")
            groups.append(group)

        if created:
            await self.session.commit()
        return groups

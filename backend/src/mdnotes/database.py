# Database connection setup
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from .config import get_settings
from .core.models import BaseModel
from .core.repositories.group_repository import GroupRepository

settings = get_settings()

engine = create_async_engine(settings.database_url, echo=settings.database_echo)

# objects stay usable after commit; async sessions cannot lazy-load expired attributes
AsyncSessionLocal = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def get_db_session():
    """Get database session."""
    async with AsyncSessionLocal() as session:
        try:
            yield session
        finally:
            await session.close()


async def create_tables():
    """Create all tables."""
    async with engine.begin() as conn:
        await conn.run_sync(BaseModel.metadata.create_all)


async def ensure_special_groups():
    """Seed the everyone / loggedIn groups."""
    async with AsyncSessionLocal() as session:
        await GroupRepository(session).ensure_special_groups()

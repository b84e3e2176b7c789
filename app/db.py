from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from app.core.config import DATABASE_URL, SQL_ECHO
from app.models.base import Base

# Create engine
engine = create_async_engine(DATABASE_URL, echo=SQL_ECHO)

# Async session maker
async_session = sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False
)

# Dependency
async def get_db():
    async with async_session() as session:
        yield session

async def create_db_and_tables():
    import app.models  # registers all models via models/__init__.py

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

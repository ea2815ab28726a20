from contextlib import asynccontextmanager

from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.orm import DeclarativeBase

from familygen.config import ASYNC_DB_URL

class Base(DeclarativeBase):
    pass

engine = create_async_engine(ASYNC_DB_URL, echo=False, pool_pre_ping=True)
SessionLocal = async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)

async def get_db():
    async with SessionLocal() as session:
        yield session

@asynccontextmanager
async def transaction(db: AsyncSession):
    """
    Commit everything executed inside the block, or roll all of it back.
    The session itself is released by get_db when the request ends.
    """
    try:
        yield db
        await db.commit()
    except Exception:
        await db.rollback()
        raise

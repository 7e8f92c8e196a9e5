from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from retro_writing.core.config import settings
from retro_writing.db.base import Base

# Асинхронный движок
engine = create_async_engine(settings.database_url, future=True, echo=settings.database_echo)

# Сессии
SessionLocal = async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)


async def get_db():
    """Сессия БД для dependency injection в FastAPI"""
    async with SessionLocal() as session:
        yield session


async def init_models() -> None:
    """Создание таблиц, если их ещё нет"""
    import retro_writing.db.models  # noqa: F401  регистрирует модели в metadata

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

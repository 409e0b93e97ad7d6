from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import (
    create_async_engine,
    async_sessionmaker,
    AsyncEngine,
    AsyncSession,
)
from supabase import acreate_client

from config.settings import Settings, settings as default_settings
from database.models import Base
from database.store import SqlAlchemyStore, StoreConfigurationError
from database.supabase_store import SupabaseStore


def create_engine(database_url: str) -> AsyncEngine:
    return create_async_engine(database_url, echo=False)


def create_session_pool(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Создает и возвращает пул асинхронных сессий для работы с базой данных."""
    return async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)


async def create_tables(engine: AsyncEngine) -> None:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


@asynccontextmanager
async def open_store(
    settings: Settings = default_settings,
) -> AsyncGenerator[SqlAlchemyStore | SupabaseStore, None]:
    """
    Открывает хранилище, выбранное в STORE_BACKEND, и закрывает его по выходе.
    Без нужных настроек бросает StoreConfigurationError.
    """
    if settings.STORE_BACKEND == "supabase":
        if not settings.SUPABASE_URL or not settings.SUPABASE_KEY:
            raise StoreConfigurationError(
                "SUPABASE_URL и SUPABASE_KEY должны быть заданы в .env"
            )
        client = await acreate_client(settings.SUPABASE_URL, settings.SUPABASE_KEY)
        try:
            yield SupabaseStore(client)
        finally:
            await client.postgrest.aclose()
        return

    if not settings.DATABASE_URL:
        raise StoreConfigurationError("DATABASE_URL должен быть задан в .env")

    engine = create_engine(settings.DATABASE_URL)
    try:
        yield SqlAlchemyStore(create_session_pool(engine))
    finally:
        await engine.dispose()

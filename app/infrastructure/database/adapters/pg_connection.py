from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from app.infrastructure.config.config import DB_CONFIG
from app.infrastructure.database.models.base import Base
from app.infrastructure.logging import get_logger


logger = get_logger(__name__)


class DatabaseConnection:
    def __init__(self, url: str | None = None):
        self._engine = create_async_engine(
            url=url or DB_CONFIG.get_url()
        )
        self._session_maker = async_sessionmaker(bind=self._engine, expire_on_commit=False)

    async def get_session(self) -> AsyncSession:
        return self._session_maker()

    async def check_connection(self) -> bool:
        try:
            async with self._engine.connect() as connection:
                await connection.execute(text("SELECT 1"))
        except Exception as exc:
            logger.error("database_connection_failed", error=str(exc))
            return False
        return True

    async def init_schema(self) -> None:
        async with self._engine.begin() as connection:
            await connection.run_sync(Base.metadata.create_all)
        logger.info("database_schema_initialized")

    async def dispose(self) -> None:
        await self._engine.dispose()

from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import AsyncAdaptedQueuePool
from contextlib import asynccontextmanager
from app.core.config import settings
from app.core.logger import get_logger

logger = get_logger("database")


def _engine_options(url: str) -> dict:
    """Pooling and driver options for the configured database."""
    if url.startswith("sqlite"):
        # Local/test databases: no pool tuning, no server settings
        return {"echo": False}

    ssl_config = {} if settings.IS_DEVELOPMENT else {"ssl": "require"}
    return {
        "echo": False,
        "connect_args": {
            **ssl_config,
            "server_settings": {
                "application_name": "sprite_backend",
                "jit": "off",
            },
            "command_timeout": 30,
        },
        "poolclass": AsyncAdaptedQueuePool,
        "pool_size": 10,
        "max_overflow": 20,
        "pool_timeout": 30,
        "pool_recycle": 1800,
        "pool_pre_ping": True,
    }


engine = create_async_engine(settings.DATABASE_URL, **_engine_options(settings.DATABASE_URL))

AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)

async def get_db():
    """Dependency for getting a database session."""
    async with AsyncSessionLocal() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()

@asynccontextmanager
async def async_session():
    """Context manager for a database session outside request handling."""
    async with AsyncSessionLocal() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()

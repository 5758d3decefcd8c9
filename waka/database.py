from fastapi import Request
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from waka.config import Settings

# SQLite INTEGER is a signed 64-bit value
MAX_SQL_INTEGER = 2**63 - 1


def fits_integer_column(value: int) -> bool:
    return -MAX_SQL_INTEGER - 1 <= value <= MAX_SQL_INTEGER


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""
    pass


def build_engine(settings: Settings) -> AsyncEngine:
    """
    Create the async engine for the catalog store.

    SQLite waits up to `database_busy_timeout` seconds for the write lock,
    which gives concurrent ingestions single-writer semantics.
    """
    connect_args = {}
    if settings.database_url.startswith("sqlite"):
        connect_args["timeout"] = settings.database_busy_timeout

    return create_async_engine(
        settings.database_url,
        echo=settings.debug,  # Log SQL queries in debug mode
        pool_pre_ping=True,
        connect_args=connect_args,
    )


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


async def init_models(engine: AsyncEngine) -> None:
    """Create missing tables. Existing tables are left untouched."""
    # Register every model on Base.metadata
    import waka.models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def get_db(request: Request):
    """
    Dependency that provides a database session.

    The session factory is built once in `create_app` and kept on
    `app.state`, so each app (and each test) has its own store.

    Usage in FastAPI:
        @app.get("/items")
        async def get_items(db: AsyncSession = Depends(get_db)):
            ...
    """
    async with request.app.state.session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise

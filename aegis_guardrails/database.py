"""Database connection and session management."""

from collections.abc import AsyncGenerator
from urllib.parse import parse_qs, urlencode, urlparse, urlunparse

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from aegis_guardrails.config import settings


def split_ssl_params(url: str) -> tuple[str, dict]:
    """Move sslmode/ssl query params into asyncpg connect_args (asyncpg rejects them in the URL)."""
    connect_args: dict = {}
    parsed = urlparse(url)
    query = parse_qs(parsed.query)
    ssl_values = query.pop("sslmode", []) + query.pop("ssl", [])
    if not ssl_values:
        return url, connect_args
    if any(v not in ("disable", "false", "0") for v in ssl_values):
        connect_args["ssl"] = "require"
    return urlunparse(parsed._replace(query=urlencode(query, doseq=True))), connect_args


_db_url, _connect_args = split_ssl_params(settings.database_url)


class Base(DeclarativeBase):
    """SQLAlchemy declarative base."""

    pass


engine = create_async_engine(
    _db_url,
    echo=settings.log_level == "DEBUG",
    connect_args=_connect_args,
)

async_session_maker = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autocommit=False,
    autoflush=False,
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Dependency for database sessions."""
    async with async_session_maker() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()

"""Process-wide async engine, rebuilt if ``settings.database_url`` is reassigned."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from pawboard.core.config import settings


@dataclass(frozen=True)
class _Binding:
    url: str
    engine: AsyncEngine
    session_maker: async_sessionmaker[AsyncSession]


_binding: _Binding | None = None


def _engine_options(database_url: str) -> dict[str, Any]:
    if make_url(database_url).get_backend_name() == "sqlite":
        return {"connect_args": {"check_same_thread": False}}
    return {"pool_pre_ping": True}


def _bind(database_url: str) -> _Binding:
    engine = create_async_engine(database_url, **_engine_options(database_url))
    return _Binding(
        url=database_url,
        engine=engine,
        session_maker=async_sessionmaker(bind=engine, expire_on_commit=False),
    )


def _current() -> _Binding:
    global _binding
    database_url = str(settings.database_url)
    if _binding is None or _binding.url != database_url:
        if _binding is not None:
            _binding.engine.sync_engine.dispose()
        _binding = _bind(database_url)
    return _binding


def get_engine() -> AsyncEngine:
    return _current().engine


def get_session_maker() -> async_sessionmaker[AsyncSession]:
    return _current().session_maker

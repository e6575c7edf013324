"""One database transaction per request, shared by every service the handler touches."""

from __future__ import annotations

from collections.abc import AsyncIterator, Callable, Mapping
from functools import cached_property
from typing import Any

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncSession

from pawboard.db.session import get_session_maker
from pawboard.services.auth_service import AuthService
from pawboard.services.moderation_service import ModerationService
from pawboard.services.question_service import QuestionService

ServiceRegistry = Mapping[str, Callable[[AsyncSession], Any]]


class UnitOfWork:
    """Binds the registry's service factories to the request's session on first use."""

    def __init__(self, session: AsyncSession, services: ServiceRegistry) -> None:
        self.session = session
        self._services = services

    def _build(self, name: str) -> Any:
        return self._services[name](self.session)

    @cached_property
    def auth_service(self) -> AuthService:
        return self._build("auth_service")

    @cached_property
    def question_service(self) -> QuestionService:
        return self._build("question_service")

    @cached_property
    def moderation_service(self) -> ModerationService:
        return self._build("moderation_service")


async def get_uow(request: Request) -> AsyncIterator[UnitOfWork]:
    """Commit when the handler returns normally; roll back if anything raises."""
    async with get_session_maker()() as session:
        try:
            yield UnitOfWork(session, request.app.state.services)
        except Exception:
            await session.rollback()
            raise
        await session.commit()

"""Persistent key-value store for small JSON documents owned by users."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Protocol

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from pawboard.db.models.kv_entry import KeyValueEntry


@dataclass(frozen=True)
class KeyValueRecord:
    namespace: str
    key: str
    owner_id: int | None
    value: dict[str, Any]
    updated_at: datetime | None


class KeyValueStore(Protocol):
    """Storage seam for per-owner documents (decision logs, drafts)."""

    async def get(self, namespace: str, key: str) -> dict[str, Any] | None: ...

    async def put(
        self,
        namespace: str,
        key: str,
        value: dict[str, Any],
        owner_id: int | None = None,
    ) -> None: ...

    async def list_by_owner(
        self, namespace: str, owner_id: int, limit: int = 50
    ) -> list[KeyValueRecord]: ...


class SqlKeyValueStore:
    """KeyValueStore backed by the kv_entries table in the request's session."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def _find(self, namespace: str, key: str) -> KeyValueEntry | None:
        result = await self._session.execute(
            select(KeyValueEntry).where(
                KeyValueEntry.namespace == namespace, KeyValueEntry.key == key
            )
        )
        return result.scalar_one_or_none()

    async def get(self, namespace: str, key: str) -> dict[str, Any] | None:
        entry = await self._find(namespace, key)
        return dict(entry.value) if entry is not None else None

    async def put(
        self,
        namespace: str,
        key: str,
        value: dict[str, Any],
        owner_id: int | None = None,
    ) -> None:
        entry = await self._find(namespace, key)
        if entry is None:
            self._session.add(
                KeyValueEntry(namespace=namespace, key=key, owner_id=owner_id, value=value)
            )
        else:
            entry.value = value
            if owner_id is not None:
                entry.owner_id = owner_id
        await self._session.flush()

    async def list_by_owner(
        self, namespace: str, owner_id: int, limit: int = 50
    ) -> list[KeyValueRecord]:
        result = await self._session.execute(
            select(KeyValueEntry)
            .where(KeyValueEntry.namespace == namespace, KeyValueEntry.owner_id == owner_id)
            .order_by(KeyValueEntry.updated_at.desc(), KeyValueEntry.id.desc())
            .limit(limit)
        )
        return [
            KeyValueRecord(
                namespace=entry.namespace,
                key=entry.key,
                owner_id=entry.owner_id,
                value=dict(entry.value),
                updated_at=entry.updated_at,
            )
            for entry in result.scalars()
        ]

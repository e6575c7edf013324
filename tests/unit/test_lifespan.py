from __future__ import annotations

import logging
from collections.abc import Iterator
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi import FastAPI

from pawboard.core import lifespan as lifespan_module
from pawboard.core.lifespan import lifespan, verify_database_connection


@pytest.fixture
def engine() -> Iterator[MagicMock]:
    """A stand-in engine whose connect() yields an async connection."""
    mock_engine = MagicMock()
    mock_engine.dispose = AsyncMock()
    conn = AsyncMock()
    conn.__aenter__.return_value = conn
    mock_engine.connect.return_value = conn
    with patch("pawboard.core.lifespan.get_engine", return_value=mock_engine):
        yield mock_engine


class TestVerifyDatabaseConnection:
    @pytest.mark.asyncio
    async def test_runs_probe_query(self, engine: MagicMock) -> None:
        await verify_database_connection()

        engine.connect.return_value.execute.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_wraps_driver_errors(self, engine: MagicMock) -> None:
        engine.connect.side_effect = OSError("connection refused")

        with pytest.raises(RuntimeError, match="Failed to connect to database: connection refused"):
            await verify_database_connection()


class TestLifespan:
    @pytest.mark.asyncio
    @pytest.mark.parametrize(("environment", "probed"), [("test", False), ("local", True)])
    async def test_probe_depends_on_environment(
        self,
        engine: MagicMock,
        monkeypatch: pytest.MonkeyPatch,
        environment: str,
        probed: bool,
    ) -> None:
        # Arrange
        monkeypatch.setattr(lifespan_module.settings, "environment", environment)

        # Act
        with patch(
            "pawboard.core.lifespan.verify_database_connection", new_callable=AsyncMock
        ) as probe:
            async with lifespan(FastAPI()):
                pass

        # Assert
        assert probe.await_count == (1 if probed else 0)
        engine.dispose.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_logs_active_moderation_thresholds(
        self, engine: MagicMock, caplog: pytest.LogCaptureFixture
    ) -> None:
        # Act
        with caplog.at_level(logging.INFO, logger="pawboard.core.lifespan"):
            async with lifespan(FastAPI()):
                pass

        # Assert
        record = next(r for r in caplog.records if r.message == "Moderation thresholds loaded")
        assert record.spam_block == lifespan_module.settings.scoring.moderation.spam_block

    @pytest.mark.asyncio
    async def test_engine_disposed_when_startup_fails(
        self, engine: MagicMock, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        # Arrange
        monkeypatch.setattr(lifespan_module.settings, "environment", "local")

        # Act
        with (
            patch(
                "pawboard.core.lifespan.verify_database_connection",
                side_effect=RuntimeError("DB failed"),
            ),
            pytest.raises(RuntimeError, match="DB failed"),
        ):
            async with lifespan(FastAPI()):
                pass

        # Assert
        engine.dispose.assert_awaited_once()

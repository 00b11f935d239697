from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

import todoapp.main as main
from todoapp.db.transaction import Isolation
from todoapp.observability import request_logger


async def test_startup_pings_database_through_runner(monkeypatch) -> None:
    runner = MagicMock()
    runner.run = AsyncMock(return_value=None)
    monkeypatch.setattr(main, "transaction_runner", runner)

    async with main.lifespan(main.app):
        pass

    runner.run.assert_awaited_once()
    isolation, read_only, _ = runner.run.await_args.args
    assert (isolation, read_only) == (Isolation.READ_COMMITTED, True)


async def test_startup_fails_when_database_unreachable(monkeypatch) -> None:
    runner = MagicMock()
    runner.run = AsyncMock(side_effect=OSError("connection refused"))
    monkeypatch.setattr(main, "transaction_runner", runner)

    with pytest.raises(OSError):
        async with main.lifespan(main.app):
            pass


async def test_request_log_carries_route_and_todo_id(client, monkeypatch) -> None:
    log = MagicMock()
    monkeypatch.setattr(request_logger, "log", log)

    await client.put("/todo/42", json={"todo": {"done": True}})

    log.warning.assert_called_once()
    fields = log.warning.call_args.kwargs
    assert fields["route"] == "/todo/{todo_id}"
    assert fields["todo_id"] == "42"
    assert fields["status_code"] == 404


async def test_request_log_without_todo_id(client, monkeypatch) -> None:
    log = MagicMock()
    monkeypatch.setattr(request_logger, "log", log)

    await client.get("/todo")

    fields = log.info.call_args.kwargs
    assert fields["route"] == "/todo"
    assert "todo_id" not in fields


async def test_generated_trace_id_returned(client) -> None:
    response = await client.get("/todo")

    assert len(response.headers["X-Trace-ID"]) == 32

# tests/client/test_sync.py
"""Tests for the async terminal client and its state mirror."""

from collections.abc import AsyncIterator

import httpx
import pytest

from dispatch_terminal.client import DataSync, TerminalClient, TerminalClientError
from dispatch_terminal.models import Period


@pytest.fixture()
async def terminal(app, operator) -> AsyncIterator[TerminalClient]:
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as http_client:
        client = TerminalClient("http://test", http_client=http_client)
        await client.login_with_pin(operator.pin)
        yield client


async def test_pin_login_keeps_token(app, operator) -> None:
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as http_client:
        client = TerminalClient("http://test", http_client=http_client)
        login = await client.login_with_pin(" 1984 ")

        assert client.token == login["access_token"]
        assert login["session"]["label"] == "Terminal Principal"
        session = await client.session()
        assert session["tenant_id"] == "tenant-a"

        client.logout()
        assert client.token is None


async def test_wrong_pin_raises_client_error(app, operator) -> None:
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as http_client:
        client = TerminalClient("http://test", http_client=http_client)
        with pytest.raises(TerminalClientError) as exc_info:
            await client.login_with_pin("0000")

    assert exc_info.value.status_code == 401
    assert exc_info.value.detail == "Acesso negado. Código incorreto."
    assert client.token is None


async def test_load_and_dispatch(terminal: TerminalClient) -> None:
    ana = await terminal.create_driver("Ana", fleet_number="F-1")
    bia = await terminal.create_driver("Bia")
    await terminal.join_queue(Period.MORNING, ana["id"])
    await terminal.join_queue("morning", bia["id"])

    sync = DataSync(terminal)
    state = await sync.load()
    assert [entry["name"] for entry in state.morning] == ["Ana", "Bia"]
    assert len(state.drivers) == 2

    log = await sync.record_exit(Period.MORNING, "sul", orders_count=4)
    assert log["zone"] == "SUL"
    assert [entry["name"] for entry in sync.state.morning] == ["Bia"]
    assert [exit_log["id"] for exit_log in sync.state.recent_exits] == [log["id"]]

    await sync.adjust_volume(log["id"], -1)
    assert sync.state.recent_exits[0]["orders_count"] == 3


async def test_mutations_refresh_state(terminal: TerminalClient) -> None:
    sync = DataSync(terminal)
    ana = await sync.save_driver("Ana")
    bia = await sync.save_driver("Bia")
    assert {driver["name"] for driver in sync.state.drivers} == {"Ana", "Bia"}

    await sync.add_to_queue(Period.AFTERNOON, ana["id"])
    await sync.add_to_queue(Period.AFTERNOON, bia["id"])
    await sync.move(Period.AFTERNOON, 1, 0)
    assert [entry["name"] for entry in sync.state.afternoon] == ["Bia", "Ana"]

    await sync.remove_from_queue(sync.state.afternoon[0]["queue_id"])
    assert [entry["name"] for entry in sync.state.afternoon] == ["Ana"]

    await sync.delete_driver(ana["id"])
    assert sync.state.afternoon == []
    assert [driver["name"] for driver in sync.state.drivers] == ["Bia"]


async def test_duplicate_join_surfaces_conflict(terminal: TerminalClient) -> None:
    driver = await terminal.create_driver("Ana")
    await terminal.join_queue(Period.MORNING, driver["id"])
    with pytest.raises(TerminalClientError) as exc_info:
        await terminal.join_queue(Period.MORNING, driver["id"])
    assert exc_info.value.status_code == 409


async def test_exports_return_bytes(terminal: TerminalClient) -> None:
    content = await terminal.export_history(fmt="csv")
    assert content.decode("utf-8").startswith("Data,Hora,Nome")


async def test_handle_change_refreshes_named_slice(terminal: TerminalClient, mocker) -> None:
    sync = DataSync(terminal)
    refresh = mocker.AsyncMock()
    sync._refreshers["drivers"] = refresh

    assert await sync.handle_change({"type": "change", "table": "drivers", "event": "INSERT"})
    refresh.assert_awaited_once()

    assert not await sync.handle_change({"type": "subscribed"})
    assert not await sync.handle_change({"type": "change", "table": "operator_access"})


async def test_consume_refreshes_from_stream(terminal: TerminalClient) -> None:
    sync = DataSync(terminal)
    await terminal.create_driver("Ana")

    async def messages():
        yield {"type": "subscribed"}
        yield {"type": "change", "table": "drivers", "event": "INSERT"}

    await sync.consume(messages())
    assert [driver["name"] for driver in sync.state.drivers] == ["Ana"]


def test_realtime_url() -> None:
    client = TerminalClient("https://dispatch.example.com/", token="abc")
    assert client.realtime_url() == "wss://dispatch.example.com/api/v1/realtime?token=abc"

    client.logout()
    with pytest.raises(TerminalClientError):
        client.realtime_url()


async def test_reordering_and_driver_edits_refresh_state(terminal: TerminalClient) -> None:
    sync = DataSync(terminal)
    names = ["Ana", "Bia", "Caio"]
    for name in names:
        driver = await sync.save_driver(name)
        await sync.add_to_queue(Period.MORNING, driver["id"])

    caio = sync.state.morning[2]
    await sync.move_up(Period.MORNING, caio["queue_id"])
    assert [entry["name"] for entry in sync.state.morning] == ["Ana", "Caio", "Bia"]

    bia = sync.state.morning[2]
    await sync.move_to_top(Period.MORNING, bia["queue_id"])
    assert [entry["name"] for entry in sync.state.morning] == ["Bia", "Ana", "Caio"]

    await sync.update_driver(bia["driver_id"], name="Beatriz", fleet_number="F-9")
    assert sync.state.morning[0]["name"] == "Beatriz"
    assert sync.state.morning[0]["fleet_number"] == "F-9"
    assert "Beatriz" in {driver["name"] for driver in sync.state.drivers}

"""Async client and local mirror of the terminal's shared state.

``TerminalClient`` wraps the HTTP API. ``DataSync`` keeps a ``TerminalState``
current: it loads a snapshot once, then re-fetches whichever slice a change
notification names. Mutations go through the API and re-fetch explicitly, so
a push-triggered refresh can race with them; both converge on the server's
state and the last response wins.
"""

from __future__ import annotations

import json
import logging
from collections.abc import AsyncIterable, Awaitable, Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

import httpx
import websockets

from dispatch_terminal.core.periods import Period

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 10.0


class TerminalClientError(RuntimeError):
    """Raised when the API answers with a non-2xx status."""

    def __init__(self, status_code: int, detail: Any) -> None:
        super().__init__(f"API responded with {status_code}: {detail}")
        self.status_code = status_code
        self.detail = detail


def _slug(period: Period | str) -> str:
    if isinstance(period, Period):
        return period.slug
    return Period.from_slug(period).slug


class TerminalClient:
    """One method per API operation, authenticated with a bearer token."""

    def __init__(
        self,
        base_url: str = "http://localhost:8000",
        token: str | None = None,
        *,
        http_client: httpx.AsyncClient | None = None,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.token = token
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(
            base_url=self.base_url,
            timeout=httpx.Timeout(timeout_seconds),
        )

    async def __aenter__(self) -> TerminalClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    async def close(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    def _headers(self) -> dict[str, str]:
        if not self.token:
            return {}
        return {"Authorization": f"Bearer {self.token}"}

    async def _send(
        self,
        method: str,
        path: str,
        *,
        json_data: Any = None,
        params: Mapping[str, Any] | None = None,
    ) -> httpx.Response:
        clean_params = {k: v for k, v in (params or {}).items() if v is not None}
        try:
            response = await self._client.request(
                method,
                f"/api/v1{path}",
                json=json_data,
                params=clean_params or None,
                headers=self._headers(),
            )
        except httpx.HTTPError as exc:
            raise TerminalClientError(0, f"Request failed: {exc}") from exc

        if response.is_error:
            try:
                detail = response.json().get("detail", response.text)
            except ValueError:
                detail = response.text
            raise TerminalClientError(response.status_code, detail)
        return response

    async def _json(self, method: str, path: str, **kwargs: Any) -> Any:
        response = await self._send(method, path, **kwargs)
        if response.status_code == httpx.codes.NO_CONTENT or not response.content:
            return None
        return response.json()

    # Session

    async def login_with_pin(self, pin: str) -> dict[str, Any]:
        """Open a guest session and keep its token for later calls."""
        data = await self._json("POST", "/auth/pin", json_data={"pin": pin})
        self.token = data["access_token"]
        return data

    async def login_as_admin(self, access_key: str) -> dict[str, Any]:
        data = await self._json("POST", "/auth/admin", json_data={"access_key": access_key})
        self.token = data["access_token"]
        return data

    async def session(self) -> dict[str, Any]:
        return await self._json("GET", "/auth/session")

    def logout(self) -> None:
        self.token = None

    # Snapshot and queues

    async def snapshot(self) -> dict[str, Any]:
        return await self._json("GET", "/snapshot")

    async def queues(self) -> dict[str, list[dict[str, Any]]]:
        return await self._json("GET", "/queues")

    async def queue(self, period: Period | str) -> list[dict[str, Any]]:
        return await self._json("GET", f"/queues/{_slug(period)}")

    async def join_queue(self, period: Period | str, driver_id: str) -> dict[str, Any]:
        return await self._json(
            "POST", f"/queues/{_slug(period)}", json_data={"driver_id": driver_id}
        )

    async def leave_queue(self, queue_id: str) -> None:
        await self._json("DELETE", f"/queues/entries/{queue_id}")

    async def remove_at(self, period: Period | str, position: int) -> None:
        await self._json("DELETE", f"/queues/{_slug(period)}/positions/{position}")

    async def reorder(self, period: Period | str, queue_ids: list[str]) -> list[dict[str, Any]]:
        return await self._json(
            "PUT", f"/queues/{_slug(period)}/order", json_data={"queue_ids": queue_ids}
        )

    async def move(
        self, period: Period | str, from_index: int, to_index: int
    ) -> list[dict[str, Any]]:
        return await self._json(
            "POST",
            f"/queues/{_slug(period)}/move",
            json_data={"from_index": from_index, "to_index": to_index},
        )

    async def move_to_top(self, period: Period | str, queue_id: str) -> list[dict[str, Any]]:
        return await self._json("POST", f"/queues/{_slug(period)}/entries/{queue_id}/top")

    async def move_up(self, period: Period | str, queue_id: str) -> list[dict[str, Any]]:
        return await self._json("POST", f"/queues/{_slug(period)}/entries/{queue_id}/up")

    async def record_exit(
        self,
        period: Period | str,
        zone: str,
        *,
        dt_number: str = "",
        orders_count: int = 1,
        queue_id: str | None = None,
    ) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "zone": zone,
            "dt_number": dt_number,
            "orders_count": orders_count,
        }
        if queue_id is not None:
            payload["queue_id"] = queue_id
        return await self._json("POST", f"/queues/{_slug(period)}/exit", json_data=payload)

    # Exit logs

    async def recent_exits(self, limit: int | None = None) -> list[dict[str, Any]]:
        return await self._json("GET", "/exit-logs/recent", params={"limit": limit})

    async def history(
        self,
        start: str | None = None,
        end: str | None = None,
        q: str | None = None,
    ) -> list[dict[str, Any]]:
        return await self._json(
            "GET", "/exit-logs", params={"start": start, "end": end, "q": q}
        )

    async def adjust_volume(self, log_id: str, delta: int) -> dict[str, Any]:
        return await self._json(
            "PATCH", f"/exit-logs/{log_id}/volume", json_data={"delta": delta}
        )

    async def delete_exit(self, log_id: str) -> None:
        await self._json("DELETE", f"/exit-logs/{log_id}")

    # Drivers

    async def drivers(self, q: str | None = None) -> list[dict[str, Any]]:
        return await self._json("GET", "/drivers", params={"q": q})

    async def create_driver(
        self,
        name: str,
        fleet_number: str = "",
        registration: str = "",
        company: str = "",
    ) -> dict[str, Any]:
        return await self._json(
            "POST",
            "/drivers",
            json_data={
                "name": name,
                "fleet_number": fleet_number,
                "registration": registration,
                "company": company,
            },
        )

    async def update_driver(self, driver_id: str, **fields: str) -> dict[str, Any]:
        return await self._json("PUT", f"/drivers/{driver_id}", json_data=fields)

    async def delete_driver(self, driver_id: str) -> dict[str, Any]:
        return await self._json("DELETE", f"/drivers/{driver_id}")

    # Reports

    async def daily_report(self, day: str | None = None) -> dict[str, Any]:
        return await self._json("GET", "/reports/daily", params={"day": day})

    async def productivity(
        self, driver_id: str, start: str | None = None, end: str | None = None
    ) -> dict[str, Any]:
        return await self._json(
            "GET",
            f"/reports/productivity/{driver_id}",
            params={"start": start, "end": end},
        )

    async def queue_frequency(self) -> dict[str, Any]:
        return await self._json("GET", "/reports/queue-frequency")

    async def export_history(
        self,
        fmt: str = "xlsx",
        start: str | None = None,
        end: str | None = None,
        q: str | None = None,
    ) -> bytes:
        response = await self._send(
            "GET",
            "/reports/history/export",
            params={"fmt": fmt, "start": start, "end": end, "q": q},
        )
        return response.content

    async def export_productivity(
        self,
        driver_id: str,
        fmt: str = "xlsx",
        start: str | None = None,
        end: str | None = None,
    ) -> bytes:
        response = await self._send(
            "GET",
            f"/reports/productivity/{driver_id}/export",
            params={"fmt": fmt, "start": start, "end": end},
        )
        return response.content

    # Purge

    async def purge_challenge(self) -> dict[str, Any]:
        return await self._json("POST", "/purge/challenge")

    async def purge_confirm(self, code: str) -> dict[str, Any]:
        return await self._json("POST", "/purge/confirm", json_data={"code": code})

    # Realtime

    def realtime_url(self) -> str:
        if not self.token:
            raise TerminalClientError(401, "Log in before subscribing to changes")
        scheme, _, rest = self.base_url.partition("://")
        ws_scheme = "wss" if scheme == "https" else "ws"
        return f"{ws_scheme}://{rest}/api/v1/realtime?token={self.token}"


@dataclass
class TerminalState:
    """What the terminal renders."""

    morning: list[dict[str, Any]] = field(default_factory=list)
    afternoon: list[dict[str, Any]] = field(default_factory=list)
    drivers: list[dict[str, Any]] = field(default_factory=list)
    recent_exits: list[dict[str, Any]] = field(default_factory=list)

    def queue(self, period: Period) -> list[dict[str, Any]]:
        return self.morning if period is Period.MORNING else self.afternoon


class DataSync:
    """Keeps a ``TerminalState`` in step with the server."""

    def __init__(self, client: TerminalClient) -> None:
        self.client = client
        self.state = TerminalState()
        self._refreshers: dict[str, Callable[[], Awaitable[None]]] = {
            "queues": self.refresh_queues,
            "drivers": self.refresh_drivers,
            "exit_logs": self.refresh_recent_exits,
        }

    async def load(self) -> TerminalState:
        """Replace the whole state with a fresh snapshot."""
        snapshot = await self.client.snapshot()
        self.state.morning = snapshot["morning"]
        self.state.afternoon = snapshot["afternoon"]
        self.state.drivers = snapshot["drivers"]
        self.state.recent_exits = snapshot["recent_exits"]
        return self.state

    async def refresh_queues(self) -> None:
        queues = await self.client.queues()
        self.state.morning = queues["morning"]
        self.state.afternoon = queues["afternoon"]

    async def refresh_drivers(self) -> None:
        self.state.drivers = await self.client.drivers()

    async def refresh_recent_exits(self) -> None:
        self.state.recent_exits = await self.client.recent_exits()

    async def handle_change(self, message: Mapping[str, Any]) -> bool:
        """Re-fetch the slice a change notification names.

        Returns:
            True if a refresh ran.
        """
        if message.get("type") != "change":
            return False
        refresher = self._refreshers.get(str(message.get("table")))
        if refresher is None:
            logger.debug("Ignoring change for unknown table %s", message.get("table"))
            return False
        await refresher()
        return True

    async def consume(self, messages: AsyncIterable[Mapping[str, Any]]) -> None:
        async for message in messages:
            await self.handle_change(message)

    async def listen(self) -> None:
        """Follow the server's change feed until the connection closes."""

        async def _decoded() -> AsyncIterable[Mapping[str, Any]]:
            async with websockets.connect(self.client.realtime_url()) as connection:
                async for raw in connection:
                    yield json.loads(raw)

        await self.consume(_decoded())

    # Mutations: call the API, then refresh what it touched.

    async def add_to_queue(self, period: Period, driver_id: str) -> None:
        await self.client.join_queue(period, driver_id)
        await self.refresh_queues()

    async def remove_from_queue(self, queue_id: str) -> None:
        await self.client.leave_queue(queue_id)
        await self.refresh_queues()

    async def reorder(self, period: Period, queue_ids: list[str]) -> None:
        await self.client.reorder(period, queue_ids)
        await self.refresh_queues()

    async def move(self, period: Period, from_index: int, to_index: int) -> None:
        await self.client.move(period, from_index, to_index)
        await self.refresh_queues()

    async def move_to_top(self, period: Period, queue_id: str) -> None:
        await self.client.move_to_top(period, queue_id)
        await self.refresh_queues()

    async def move_up(self, period: Period, queue_id: str) -> None:
        await self.client.move_up(period, queue_id)
        await self.refresh_queues()

    async def record_exit(self, period: Period, zone: str, **details: Any) -> dict[str, Any]:
        log = await self.client.record_exit(period, zone, **details)
        await self.refresh_queues()
        await self.refresh_recent_exits()
        return log

    async def adjust_volume(self, log_id: str, delta: int) -> None:
        await self.client.adjust_volume(log_id, delta)
        await self.refresh_recent_exits()

    async def delete_exit(self, log_id: str) -> None:
        await self.client.delete_exit(log_id)
        await self.refresh_recent_exits()

    async def save_driver(self, name: str, **details: str) -> dict[str, Any]:
        driver = await self.client.create_driver(name, **details)
        await self.refresh_drivers()
        return driver

    async def update_driver(self, driver_id: str, **fields: str) -> dict[str, Any]:
        """Save driver edits; queue rows show driver fields, so both are re-fetched."""
        driver = await self.client.update_driver(driver_id, **fields)
        await self.refresh_drivers()
        await self.refresh_queues()
        return driver

    async def delete_driver(self, driver_id: str) -> None:
        await self.client.delete_driver(driver_id)
        await self.load()

"""In-process change feed pushed to realtime subscribers.

Every committed mutation on ``drivers``, ``queues`` or ``exit_logs`` is
published here. WebSocket subscribers each own a bounded asyncio queue bound
to the event loop they subscribed from, so publishers may run on any thread.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from threading import Lock
from typing import Final

from dispatch_terminal.core.settings import settings

logger = logging.getLogger(__name__)

TABLE_DRIVERS: Final[str] = "drivers"
TABLE_QUEUES: Final[str] = "queues"
TABLE_EXIT_LOGS: Final[str] = "exit_logs"

EVENT_INSERT: Final[str] = "INSERT"
EVENT_UPDATE: Final[str] = "UPDATE"
EVENT_DELETE: Final[str] = "DELETE"


@dataclass(frozen=True)
class ChangeEvent:
    """A single committed row mutation."""

    table: str
    event: str
    record_id: str | None = None
    tenant_id: str | None = None

    def to_message(self) -> dict[str, str | None]:
        return {
            "type": "change",
            "table": self.table,
            "event": self.event,
            "record_id": self.record_id,
            "tenant_id": self.tenant_id,
        }


@dataclass(eq=False)
class Subscription:
    """One realtime listener and its buffered events."""

    loop: asyncio.AbstractEventLoop
    queue: asyncio.Queue[ChangeEvent]
    tenant_id: str | None = None
    is_admin: bool = False
    dropped: int = field(default=0)

    def wants(self, event: ChangeEvent) -> bool:
        if self.is_admin:
            return True
        return event.tenant_id is None or event.tenant_id == self.tenant_id

    def offer(self, event: ChangeEvent) -> None:
        try:
            self.queue.put_nowait(event)
        except asyncio.QueueFull:
            self.dropped += 1
            logger.warning(
                "Realtime subscriber buffer full; dropped %s %s event",
                event.table,
                event.event,
            )


class ChangeFeed:
    """Fan-out of change events to realtime subscribers."""

    def __init__(self, buffer_size: int | None = None) -> None:
        self._buffer_size = max(1, int(buffer_size or settings.realtime_buffer_size))
        self._subscriptions: set[Subscription] = set()
        self._lock = Lock()

    def subscribe(self, *, tenant_id: str | None, is_admin: bool) -> Subscription:
        """Register a listener on the running event loop."""
        subscription = Subscription(
            loop=asyncio.get_running_loop(),
            queue=asyncio.Queue(maxsize=self._buffer_size),
            tenant_id=tenant_id,
            is_admin=is_admin,
        )
        with self._lock:
            self._subscriptions.add(subscription)
        logger.debug("Realtime subscriber added (tenant=%s)", tenant_id)
        return subscription

    def unsubscribe(self, subscription: Subscription) -> None:
        with self._lock:
            self._subscriptions.discard(subscription)
        logger.debug("Realtime subscriber removed (tenant=%s)", subscription.tenant_id)

    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subscriptions)

    def publish(self, event: ChangeEvent) -> int:
        """Deliver ``event`` to interested subscribers.

        Returns:
            The number of subscribers the event was handed to.
        """
        with self._lock:
            targets = [sub for sub in self._subscriptions if sub.wants(event)]

        delivered = 0
        for subscription in targets:
            try:
                subscription.loop.call_soon_threadsafe(subscription.offer, event)
            except RuntimeError:
                # Loop already closed; the subscriber is gone.
                self.unsubscribe(subscription)
                continue
            delivered += 1
        return delivered

    def notify(
        self,
        table: str,
        event: str,
        record_id: str | None = None,
        tenant_id: str | None = None,
    ) -> int:
        return self.publish(
            ChangeEvent(table=table, event=event, record_id=record_id, tenant_id=tenant_id)
        )


_CHANGE_FEED = ChangeFeed()


def get_change_feed() -> ChangeFeed:
    """Return the process-wide change feed."""
    return _CHANGE_FEED

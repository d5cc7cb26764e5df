"""WebSocket change feed."""

from __future__ import annotations

import asyncio
import logging

from fastapi import APIRouter, HTTPException, Query, WebSocket, WebSocketDisconnect, status

from dispatch_terminal.api.v1.dependencies import principal_from_token
from dispatch_terminal.services.changefeed import get_change_feed

logger = logging.getLogger(__name__)

router = APIRouter(tags=["sync"])


async def _wait_for_disconnect(websocket: WebSocket) -> None:
    # Inbound frames carry nothing; read them only to notice the close.
    try:
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        return


@router.websocket("/realtime")
async def realtime(websocket: WebSocket, token: str = Query(...)) -> None:
    """Push one message per committed change to ``drivers``, ``queues`` or ``exit_logs``.

    The client authenticates with the same bearer token it uses for HTTP,
    passed as the ``token`` query parameter.
    """
    try:
        principal = principal_from_token(token)
    except HTTPException:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    await websocket.accept()
    feed = get_change_feed()
    subscription = feed.subscribe(tenant_id=principal.tenant_id, is_admin=principal.is_admin)
    disconnected = asyncio.create_task(_wait_for_disconnect(websocket))
    try:
        await websocket.send_json({"type": "subscribed"})
        while True:
            next_event = asyncio.create_task(subscription.queue.get())
            done, _ = await asyncio.wait(
                {next_event, disconnected},
                return_when=asyncio.FIRST_COMPLETED,
            )
            if disconnected in done:
                next_event.cancel()
                break
            await websocket.send_json(next_event.result().to_message())
    except WebSocketDisconnect:
        pass
    finally:
        disconnected.cancel()
        feed.unsubscribe(subscription)
        logger.debug("Realtime client for %s disconnected", principal.label or principal.subject)

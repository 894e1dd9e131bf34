import json
from typing import Annotated, AsyncIterator

from fastapi import APIRouter, Depends, Request
from fastapi.responses import StreamingResponse

from app.api.v1.dependencies import get_notification_hub, require_admin
from app.infrastructure.config.config import APP_CONFIG
from app.infrastructure.notifications.hub import NotificationHub, QueueConnection


router = APIRouter()

KEEPALIVE_FRAME = ": keep-alive\n\n"


def format_event(event: dict) -> str:
    return f"data: {json.dumps(event, separators=(',', ':'))}\n\n"


async def event_stream(
    request: Request,
    hub: NotificationHub,
    connection: QueueConnection,
    keepalive_seconds: float,
) -> AsyncIterator[str]:
    await hub.register(connection)
    try:
        while True:
            event = await connection.receive(timeout=keepalive_seconds)
            if event is not None:
                yield format_event(event)
                continue
            if await request.is_disconnected():
                break
            yield KEEPALIVE_FRAME
    finally:
        await hub.unregister(connection)


@router.get(
    "/stream",
    summary="Live updates for the admin panel",
    description="Server-sent events, first `connected` then one `new_contact` per submission",
)
async def stream(
    request: Request,
    _: Annotated[str, Depends(require_admin)],
    hub: Annotated[NotificationHub, Depends(get_notification_hub)],
) -> StreamingResponse:
    return StreamingResponse(
        event_stream(request, hub, QueueConnection(), APP_CONFIG.SSE_KEEPALIVE_SECONDS),
        media_type="text/event-stream",
        headers={"Cache-Control": "no-cache", "Connection": "keep-alive"},
    )

import asyncio
from typing import Any, Protocol

from app.infrastructure.logging import get_logger
from app.utils.dates import utc_now


logger = get_logger(__name__)

CONNECTED_EVENT = {"type": "connected"}


def new_contact_event() -> dict[str, Any]:
    return {"type": "new_contact", "timestamp": utc_now().isoformat().replace("+00:00", "Z")}


class Connection(Protocol):
    async def send(self, event: dict[str, Any]) -> None: ...


class QueueConnection:
    """Live-update connection backed by a bounded queue.

    The stream endpoint drains the queue, a full queue means the
    viewer is not keeping up and the send fails.
    """

    def __init__(self, maxsize: int = 100):
        self.queue: asyncio.Queue[dict[str, Any]] = asyncio.Queue(maxsize=maxsize)

    async def send(self, event: dict[str, Any]) -> None:
        self.queue.put_nowait(event)

    async def receive(self, timeout: float | None = None) -> dict[str, Any] | None:
        try:
            return await asyncio.wait_for(self.queue.get(), timeout=timeout)
        except asyncio.TimeoutError:
            return None


class NotificationHub:
    """Registry of open admin live-update connections."""

    def __init__(self):
        self._connections: set[Connection] = set()
        self._lock = asyncio.Lock()

    @property
    def connection_count(self) -> int:
        return len(self._connections)

    async def register(self, connection: Connection) -> None:
        async with self._lock:
            self._connections.add(connection)
        logger.info("admin_stream_connected", connections=self.connection_count)
        await self._send(connection, CONNECTED_EVENT)

    async def unregister(self, connection: Connection) -> None:
        async with self._lock:
            self._connections.discard(connection)
        logger.info("admin_stream_disconnected", connections=self.connection_count)

    async def broadcast(self, event: dict[str, Any]) -> int:
        """Send `event` to every connection, returns how many accepted it."""
        async with self._lock:
            connections = list(self._connections)

        delivered = 0
        for connection in connections:
            if await self._send(connection, event):
                delivered += 1
        logger.info(
            "notification_broadcast",
            event_type=event.get("type"),
            delivered=delivered,
            connections=len(connections),
        )
        return delivered

    async def _send(self, connection: Connection, event: dict[str, Any]) -> bool:
        try:
            await connection.send(event)
        except Exception as exc:
            logger.warning(
                "notification_send_failed",
                event_type=event.get("type"),
                error=repr(exc),
            )
            return False
        return True

"""In-process realtime hub for WebSocket listeners.

``publish`` may be called from any thread (FastAPI runs synchronous
handlers in a worker pool). Each listener owns an ``asyncio.Queue`` bound
to the event loop it connected on; messages are handed over with
``call_soon_threadsafe`` and drained by the listener's WebSocket task.
Delivery is best effort: a listener whose loop is gone is dropped, and a
listener more than ``MAX_PENDING`` messages behind loses the oldest ones.
"""

from __future__ import annotations

import asyncio
import logging
import threading
from dataclasses import dataclass, field
from typing import Any

from shop.application.publisher import Publisher

logger = logging.getLogger(__name__)

MAX_PENDING = 100


@dataclass(eq=False)
class Listener:
    loop: asyncio.AbstractEventLoop
    queue: asyncio.Queue = field(default_factory=lambda: asyncio.Queue(MAX_PENDING))

    def offer(self, message: dict[str, Any]) -> None:
        """Queue *message*, discarding the oldest one when full.

        Must run on ``loop``.
        """
        if self.queue.full():
            self.queue.get_nowait()
            logger.warning("Realtime listener is falling behind; dropped a message")
        self.queue.put_nowait(message)

    async def next_message(self) -> dict[str, Any]:
        return await self.queue.get()


class RealtimeHub(Publisher):

    def __init__(self, max_pending: int = MAX_PENDING) -> None:
        self._max_pending = max_pending
        self._listeners: set[Listener] = set()
        self._lock = threading.Lock()

    @property
    def listener_count(self) -> int:
        with self._lock:
            return len(self._listeners)

    def connect(self) -> Listener:
        """Register a listener on the running event loop."""
        listener = Listener(
            loop=asyncio.get_running_loop(), queue=asyncio.Queue(self._max_pending)
        )
        with self._lock:
            self._listeners.add(listener)
        logger.debug("Realtime listener connected (%d total)", self.listener_count)
        return listener

    def disconnect(self, listener: Listener) -> None:
        with self._lock:
            self._listeners.discard(listener)
        logger.debug("Realtime listener disconnected (%d total)", self.listener_count)

    def publish(self, event: str, payload: Any) -> None:
        message = {"event": event, "payload": payload}
        with self._lock:
            listeners = list(self._listeners)
        for listener in listeners:
            try:
                listener.loop.call_soon_threadsafe(listener.offer, message)
            except RuntimeError:
                # Event loop already closed.
                self.disconnect(listener)

"""Utility helpers to push realtime events to websocket subscribers."""

from __future__ import annotations

import asyncio
import copy
import logging
from typing import Any, Iterable

from anyio import from_thread

from .registry import ConnectionRegistry, Handle, user_channel

logger = logging.getLogger(__name__)

NEW_MESSAGE_EVENT = "new_message"
NEW_NOTIFICATION_EVENT = "new_notification"


class RealtimePublisher:
    """Schedule event delivery without waiting for the client to receive it.

    Calls may come from the event loop itself or from a worker thread started
    by the web framework; in both cases the send runs as a task on the loop
    and a slow or dead client never blocks the caller.
    """

    def __init__(self, registry: ConnectionRegistry) -> None:
        self._registry = registry
        self._pending: set[asyncio.Task[None]] = set()

    @property
    def registry(self) -> ConnectionRegistry:
        return self._registry

    def emit_to_handle(self, handle: Handle, event: str, payload: Any) -> None:
        """Schedule ``event`` for a single connection."""

        self._schedule(handle, {"type": event, "data": copy.deepcopy(payload)})

    def emit_to_user_channel(
        self,
        user_id: int,
        event: str,
        payload: Any,
        *,
        exclude: Iterable[Handle] = (),
    ) -> None:
        """Schedule ``event`` for every member of the user's channel."""

        skipped = set(exclude)
        for handle in self._registry.channel_members(user_channel(user_id)):
            if handle in skipped:
                continue
            self.emit_to_handle(handle, event, payload)

    def broadcast_to_user(self, user_id: int, event: str, payload: Any) -> None:
        """Reach every live connection of ``user_id`` exactly once.

        Handles found through :meth:`ConnectionRegistry.lookup` are served
        directly, then the user's channel covers anything the lookup missed.
        """

        handles = self._registry.lookup(user_id)
        for handle in handles:
            self.emit_to_handle(handle, event, payload)
        self.emit_to_user_channel(user_id, event, payload, exclude=handles)

    def _schedule(self, handle: Handle, message: dict[str, Any]) -> None:
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            # Worker thread: hop onto the loop only long enough to spawn the task.
            from_thread.run_sync(self._spawn, handle, message)
        else:
            self._spawn(handle, message)

    def _spawn(self, handle: Handle, message: dict[str, Any]) -> None:
        task = asyncio.get_running_loop().create_task(self._deliver(handle, message))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _deliver(self, handle: Handle, message: dict[str, Any]) -> None:
        try:
            await handle.send_json(message)
        except Exception:
            logger.warning(
                "Dropping realtime connection after failed %s delivery",
                message.get("type"),
                exc_info=True,
            )
            self._registry.discard(handle)


__all__ = [
    "NEW_MESSAGE_EVENT",
    "NEW_NOTIFICATION_EVENT",
    "RealtimePublisher",
]

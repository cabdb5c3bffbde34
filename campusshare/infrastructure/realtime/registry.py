"""Connection bookkeeping for the messaging websocket."""

from __future__ import annotations

import logging
import threading
from typing import Any, Protocol

logger = logging.getLogger(__name__)


class Handle(Protocol):
    """Live transport session able to push JSON frames to one client."""

    async def send_json(self, data: Any) -> None: ...


def user_channel(user_id: int) -> str:
    """Return the name of the channel every connection of ``user_id`` joins."""

    return f"user_{user_id}"


class ConnectionRegistry:
    """Track live websocket handles per user and per channel.

    A user may hold several handles at once (one per open tab); every handle
    also joins the user's channel on connect. Lookups and mutations come from
    both the event loop and the worker threads running send requests, so all
    access goes through a lock. Nothing is persisted: a restarted process
    starts with an empty registry.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._handles: dict[int, set[Handle]] = {}
        self._channels: dict[str, set[Handle]] = {}

    async def connect(self, user_id: int, websocket: Any) -> None:
        """Accept the websocket connection and register it for ``user_id``."""

        await websocket.accept()
        self.register(user_id, websocket)

    def register(self, user_id: int, handle: Handle) -> None:
        with self._lock:
            self._handles.setdefault(user_id, set()).add(handle)
            self._channels.setdefault(user_channel(user_id), set()).add(handle)
        logger.debug("Registered realtime connection for user %s", user_id)

    def unregister(self, user_id: int, handle: Handle | None = None) -> None:
        """Forget ``handle`` (or every handle when omitted) for ``user_id``."""

        channel = user_channel(user_id)
        with self._lock:
            handles = self._handles.get(user_id, set())
            removed = set(handles) if handle is None else {handle} & handles
            handles.difference_update(removed)
            if not handles:
                self._handles.pop(user_id, None)
            members = self._channels.get(channel)
            if members is not None:
                members.difference_update(removed)
                if not members:
                    self._channels.pop(channel, None)
        logger.debug("Unregistered %s realtime connection(s) for user %s", len(removed), user_id)

    def discard(self, handle: Handle) -> None:
        """Drop ``handle`` from every user and channel it appears in."""

        with self._lock:
            for user_id in [uid for uid, hs in self._handles.items() if handle in hs]:
                self._handles[user_id].discard(handle)
                if not self._handles[user_id]:
                    del self._handles[user_id]
            for channel in [name for name, hs in self._channels.items() if handle in hs]:
                self._channels[channel].discard(handle)
                if not self._channels[channel]:
                    del self._channels[channel]

    def lookup(self, user_id: int) -> frozenset[Handle]:
        with self._lock:
            return frozenset(self._handles.get(user_id, ()))

    def channel_members(self, channel: str) -> frozenset[Handle]:
        with self._lock:
            return frozenset(self._channels.get(channel, ()))

    def is_online(self, user_id: int) -> bool:
        with self._lock:
            return bool(self._handles.get(user_id))

    def clear(self) -> None:
        with self._lock:
            self._handles.clear()
            self._channels.clear()


__all__ = ["ConnectionRegistry", "Handle", "user_channel"]

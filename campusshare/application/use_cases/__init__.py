"""Aggregate application use cases."""

from .messages import MessageDispatcher, UnreadMessageEscalation

__all__ = [
    "MessageDispatcher",
    "UnreadMessageEscalation",
]

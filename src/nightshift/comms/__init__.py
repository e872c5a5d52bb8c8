"""Internal messaging between the shift engine and its presentation layer."""

from .event_bus import EventBus

__all__ = ["EventBus"]

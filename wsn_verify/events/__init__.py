"""Event exports."""

from .bus import EventBus, EventHandler
from .types import AnalysisEvent, EventType

__all__ = ["AnalysisEvent", "EventBus", "EventHandler", "EventType"]

"""Event bus with sequence assignment."""

from __future__ import annotations

from typing import Callable

from .types import AnalysisEvent, EventType


EventHandler = Callable[[AnalysisEvent], None]


class EventBus:
    """Simple in-process pub/sub event bus with deterministic event ids."""

    def __init__(self) -> None:
        self._handlers: list[EventHandler] = []
        self._seq = 0

    def subscribe(self, handler: EventHandler) -> None:
        self._handlers.append(handler)

    def publish(
        self,
        *,
        event_type: EventType,
        time: int,
        flow_id: str | None = None,
        instance: int | None = None,
        node_id: str | None = None,
        payload: dict | None = None,
    ) -> AnalysisEvent:
        event = AnalysisEvent(
            event_id=f"evt-{self._seq:08d}",
            seq=self._seq,
            time=time,
            type=event_type,
            flow_id=flow_id,
            instance=instance,
            node_id=node_id,
            payload=payload or {},
        )
        self._seq += 1
        for handler in list(self._handlers):
            handler(event)
        return event

    def reset(self) -> None:
        self._seq = 0
        self._handlers.clear()

"""Link/node usage metrics over a schedule replay."""

from __future__ import annotations

from collections import defaultdict

from wsn_verify.events import AnalysisEvent, EventType

from .base import IMetric


class LinkMetrics(IMetric):
    """Count transmission attempts per link, busy slots per node and channel use."""

    def __init__(self) -> None:
        self.reset()

    def reset(self) -> None:
        self._link_attempts: dict[str, int] = defaultdict(int)
        self._flow_attempts: dict[str, int] = defaultdict(int)
        self._channel_use: dict[int, int] = defaultdict(int)
        self._node_busy: dict[str, set[int]] = defaultdict(set)
        self._active_slots: set[int] = set()
        self._releases = 0

    def consume(self, event: AnalysisEvent) -> None:
        if event.type == EventType.FLOW_RELEASED:
            self._releases += 1
            return
        if event.type != EventType.TRANSMISSION:
            return

        source = event.payload.get("source")
        sink = event.payload.get("sink")
        channel = event.payload.get("channel", 0)
        self._link_attempts[f"{source}->{sink}"] += 1
        if event.flow_id:
            self._flow_attempts[event.flow_id] += 1
        if isinstance(channel, int):
            self._channel_use[channel] += 1
        for node in (source, sink):
            if isinstance(node, str):
                self._node_busy[node].add(event.time)
        self._active_slots.add(event.time)

    def report(self) -> dict:
        return {
            "link_attempts": dict(sorted(self._link_attempts.items())),
            "flow_attempts": dict(sorted(self._flow_attempts.items())),
            "channel_use": {str(channel): count for channel, count in sorted(self._channel_use.items())},
            "node_busy_slots": {node: len(slots) for node, slots in sorted(self._node_busy.items())},
            "active_slots": len(self._active_slots),
            "releases": self._releases,
        }

"""Latency verification metrics."""

from __future__ import annotations

from collections import defaultdict

from wsn_verify.events import AnalysisEvent, EventType

from .base import IMetric


class LatencyMetrics(IMetric):
    """Aggregate per-flow latency outcomes from the verifier event stream."""

    def __init__(self) -> None:
        self.reset()

    def reset(self) -> None:
        self._flow_order: list[str] = []
        self._released: dict[str, int] = defaultdict(int)
        self._completed: dict[str, int] = defaultdict(int)
        self._unknown: dict[str, int] = defaultdict(int)
        self._missed: dict[str, int] = defaultdict(int)
        self._latencies: dict[str, list[int]] = defaultdict(list)
        self._slack: dict[str, list[int]] = defaultdict(list)
        self._event_count = 0

    def consume(self, event: AnalysisEvent) -> None:
        self._event_count += 1
        flow_id = event.flow_id
        if flow_id is None:
            return
        if flow_id not in self._flow_order:
            self._flow_order.append(flow_id)

        if event.type == EventType.FLOW_RELEASED:
            self._released[flow_id] += 1

        elif event.type == EventType.INSTANCE_COMPLETE:
            self._completed[flow_id] += 1
            latency = event.payload.get("latency")
            deadline = event.payload.get("deadline")
            if isinstance(latency, int):
                self._latencies[flow_id].append(latency)
                if isinstance(deadline, int):
                    self._slack[flow_id].append(deadline - latency)

        elif event.type == EventType.DEADLINE_MISS:
            self._missed[flow_id] += 1

        elif event.type == EventType.INSTANCE_UNKNOWN:
            self._unknown[flow_id] += 1

    def report(self) -> dict:
        flows: dict[str, dict] = {}
        for flow_id in self._flow_order:
            latencies = self._latencies[flow_id]
            slack = self._slack[flow_id]
            flows[flow_id] = {
                "instances": self._released[flow_id],
                "completed": self._completed[flow_id],
                "unknown": self._unknown[flow_id],
                "deadline_miss_count": self._missed[flow_id],
                "max_latency": max(latencies) if latencies else None,
                "avg_latency": sum(latencies) / len(latencies) if latencies else None,
                "min_slack": min(slack) if slack else None,
            }

        total_instances = sum(self._released.values())
        total_missed = sum(self._missed.values())
        total_unknown = sum(self._unknown.values())
        return {
            "flows": flows,
            "instances": total_instances,
            "completed": sum(self._completed.values()),
            "unknown": total_unknown,
            "deadline_miss_count": total_missed,
            "deadline_miss_ratio": total_missed / max(1, total_instances),
            "schedulable": total_missed == 0 and total_unknown == 0,
            "event_count": self._event_count,
        }

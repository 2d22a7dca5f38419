"""Strictly periodic workload model."""

from __future__ import annotations

from math import lcm
from typing import Optional

from wsn_verify.model import FlowSpec, ModelSpec

from .base import ITimingOracle


class PeriodicWorkload(ITimingOracle):
    """Release ``k`` of a flow happens at ``phase + k * period``.

    The absolute deadline of a release ``r`` is ``r + deadline``: the instance
    must complete in a slot strictly before it.
    """

    def __init__(self, flows: list[FlowSpec]) -> None:
        if not flows:
            raise ValueError("workload requires at least one flow")
        ordered = sorted(flows, key=lambda flow: flow.priority)
        self._flows: dict[str, FlowSpec] = {}
        for flow in ordered:
            if flow.id in self._flows:
                raise ValueError(f"duplicate flow id '{flow.id}'")
            self._flows[flow.id] = flow
        self._hyperperiod = lcm(*(flow.period for flow in ordered))

    @classmethod
    def from_spec(cls, spec: ModelSpec) -> "PeriodicWorkload":
        return cls(spec.flows)

    def _flow(self, flow: str) -> FlowSpec:
        try:
            return self._flows[flow]
        except KeyError:
            raise KeyError(f"unknown flow '{flow}'") from None

    def flow_ids(self) -> list[str]:
        return list(self._flows)

    def flow(self, flow: str) -> FlowSpec:
        return self._flow(flow)

    def next_release_time(self, flow: str, from_time: int) -> int:
        spec = self._flow(flow)
        if from_time <= spec.phase:
            return spec.phase
        elapsed = from_time - spec.phase
        k = -(-elapsed // spec.period)
        return spec.phase + k * spec.period

    def current_release_time(self, flow: str, time: int) -> Optional[int]:
        spec = self._flow(flow)
        if time < spec.phase:
            return None
        k = (time - spec.phase) // spec.period
        return spec.phase + k * spec.period

    def next_absolute_deadline(self, flow: str, from_time: int) -> int:
        return self.next_release_time(flow, from_time) + self._flow(flow).deadline

    def hyperperiod(self) -> int:
        return self._hyperperiod

    def period(self, flow: str) -> int:
        return self._flow(flow).period

    def relative_deadline(self, flow: str) -> int:
        return self._flow(flow).deadline

    def path_nodes(self, flow: str) -> list[str]:
        return list(self._flow(flow).path)

    def attempts_per_link(self, flow: str) -> list[int]:
        return list(self._flow(flow).attempts)

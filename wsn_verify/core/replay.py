"""SimPy-backed slot-by-slot replay of a schedule table."""

from __future__ import annotations

import logging
from typing import Callable

import simpy

from wsn_verify.events import AnalysisEvent, EventBus, EventType
from wsn_verify.metrics import IMetric, LinkMetrics
from wsn_verify.model import ModelSpec, TransmissionRecord
from wsn_verify.schedule import CellDecodeCache, IInstructionDecoder, ScheduleTable, create_decoder
from wsn_verify.workload import ITimingOracle, PeriodicWorkload

logger = logging.getLogger(__name__)


class ScheduleReplay:
    """Replay releases and scheduled transmissions on a SimPy clock.

    One process per flow publishes ``FlowReleased`` at every release; one slot
    process publishes a ``Transmission`` per distinct attempt of each slot.
    """

    def __init__(self, metrics: list[IMetric] | None = None) -> None:
        self._metrics = metrics or [LinkMetrics()]
        self._subscribers: list[Callable[[AnalysisEvent], None]] = []
        self._env = simpy.Environment()
        self._event_bus = EventBus()
        self._events: list[AnalysisEvent] = []
        self._oracle: ITimingOracle | None = None
        self._cells: CellDecodeCache | None = None
        self._horizon = 0

    def subscribe(self, handler: Callable[[AnalysisEvent], None]) -> None:
        if handler not in self._subscribers:
            self._subscribers.append(handler)

    def build(self, spec: ModelSpec) -> None:
        oracle = PeriodicWorkload.from_spec(spec)
        table = ScheduleTable.from_spec(spec, slots=oracle.hyperperiod())
        self.bind(oracle, table, create_decoder(spec.schedule.decoder))

    def bind(self, oracle: ITimingOracle, table: ScheduleTable, decoder: IInstructionDecoder) -> None:
        self._oracle = oracle
        self._cells = CellDecodeCache(table, decoder)

    def _reset_run(self) -> None:
        self._env = simpy.Environment()
        self._event_bus = EventBus()
        self._events = []
        self._event_bus.subscribe(self._events.append)
        for metric in self._metrics:
            metric.reset()
            self._event_bus.subscribe(metric.consume)
        for handler in self._subscribers:
            self._event_bus.subscribe(handler)
        if self._cells is not None:
            self._cells.clear()

    def run(self, until: int | None = None) -> None:
        if self._oracle is None or self._cells is None:
            raise RuntimeError("build() must be called before run()")
        self._reset_run()
        horizon = until if until is not None else max(self._oracle.hyperperiod(), self._cells.table.row_count())
        self._horizon = horizon
        for flow in self._oracle.flow_ids():
            self._env.process(self._release_process(flow, horizon))
        self._env.process(self._slot_process(horizon))
        self._env.run(until=horizon)
        logger.debug("replayed %d slots, %d events", horizon, len(self._events))

    def _release_process(self, flow: str, horizon: int):
        release = self._oracle.next_release_time(flow, 0)
        if release > 0:
            yield self._env.timeout(release)
        instance = 0
        while self._env.now < horizon:
            self._event_bus.publish(
                event_type=EventType.FLOW_RELEASED,
                time=int(self._env.now),
                flow_id=flow,
                instance=instance,
                payload={"absolute_deadline": self._oracle.next_absolute_deadline(flow, int(self._env.now))},
            )
            instance += 1
            yield self._env.timeout(self._oracle.period(flow))

    def _slot_process(self, horizon: int):
        while self._env.now < horizon:
            self._publish_slot(int(self._env.now))
            yield self._env.timeout(1)

    def _publish_slot(self, time: int) -> None:
        table = self._cells.table
        attempts: dict[tuple[str, str, str, int], list[tuple[str, TransmissionRecord]]] = {}
        for column, record in self._cells.row_records(time):
            attempts.setdefault(record.key, []).append((table.columns[column], record))
        for key, placements in attempts.items():
            flow, source, sink, channel = key
            self._event_bus.publish(
                event_type=EventType.TRANSMISSION,
                time=time,
                flow_id=flow,
                node_id=source,
                payload={
                    "source": source,
                    "sink": sink,
                    "channel": channel,
                    "columns": [node for node, _record in placements],
                    "kinds": sorted({record.kind.value for _node, record in placements}),
                },
            )

    @property
    def events(self) -> list[AnalysisEvent]:
        return list(self._events)

    @property
    def now(self) -> int:
        return int(self._env.now)

    @property
    def decode_failures(self) -> dict[tuple[int, int], str]:
        if self._cells is None:
            return {}
        return dict(self._cells.failures)

    def metric_report(self) -> dict:
        merged: dict = {}
        for metric in self._metrics:
            merged.update(metric.report())
        merged["horizon"] = self._horizon
        active = merged.get("active_slots")
        if isinstance(active, int):
            merged["idle_slots"] = max(0, self._horizon - active)
        return merged

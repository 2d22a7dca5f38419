"""Latency verification facade over a precomputed schedule."""

from __future__ import annotations

import logging
from typing import Callable

from wsn_verify.events import AnalysisEvent, EventBus
from wsn_verify.metrics import IMetric, LatencyMetrics
from wsn_verify.model import CompletionPolicy, InstanceOutcome, ModelSpec
from wsn_verify.schedule import CellDecodeCache, IInstructionDecoder, ScheduleTable, create_decoder
from wsn_verify.workload import ITimingOracle, PeriodicWorkload

from .interfaces import IVerifier
from .latency_table import LatencyTable, LatencyTableBuilder
from .report import DEFAULT_SEPARATOR, LatencyReport, ReportBuilder
from .scanner import InstanceScanner

logger = logging.getLogger(__name__)


class ModelError(ValueError):
    """Workload/schedule combination violates an analysis precondition."""


class LatencyVerifier(IVerifier):
    """Verify per-instance latencies of every flow against a schedule table.

    Collaborators passed to the constructor take precedence over the ones
    :meth:`build` derives from a :class:`ModelSpec`.
    """

    def __init__(
        self,
        oracle: ITimingOracle | None = None,
        table: ScheduleTable | None = None,
        decoder: IInstructionDecoder | None = None,
        metrics: list[IMetric] | None = None,
    ) -> None:
        self._external_oracle = oracle
        self._external_table = table
        self._external_decoder = decoder
        self._metrics = metrics or [LatencyMetrics()]
        self._subscribers: list[Callable[[AnalysisEvent], None]] = []

        self._event_bus = EventBus()
        self._events: list[AnalysisEvent] = []
        self._setup_event_pipeline()

        self._oracle: ITimingOracle | None = None
        self._table: ScheduleTable | None = None
        self._decoder: IInstructionDecoder | None = None
        self._policy = CompletionPolicy.FINAL_LINK
        self._separator = DEFAULT_SEPARATOR
        self._cells: CellDecodeCache | None = None
        self._latency_table: LatencyTable | None = None
        self._report: LatencyReport | None = None

    def subscribe(self, handler: Callable[[AnalysisEvent], None]) -> None:
        if handler in self._subscribers:
            return
        self._subscribers.append(handler)
        self._event_bus.subscribe(handler)

    def build(self, spec: ModelSpec, *, completion_policy: CompletionPolicy | str | None = None) -> None:
        oracle = self._external_oracle or PeriodicWorkload.from_spec(spec)
        table = self._external_table or ScheduleTable.from_spec(spec, slots=oracle.hyperperiod())
        decoder = self._external_decoder or create_decoder(spec.schedule.decoder)
        self.bind(
            oracle,
            table,
            decoder,
            completion_policy=completion_policy or spec.analysis.completion_policy,
            separator=spec.analysis.separator,
        )

    def bind(
        self,
        oracle: ITimingOracle,
        table: ScheduleTable,
        decoder: IInstructionDecoder,
        *,
        completion_policy: CompletionPolicy | str = CompletionPolicy.FINAL_LINK,
        separator: str = DEFAULT_SEPARATOR,
    ) -> None:
        self.reset()
        self._validate(oracle, table)
        self._oracle = oracle
        self._table = table
        self._decoder = decoder
        self._policy = CompletionPolicy(completion_policy)
        self._separator = separator
        logger.debug(
            "bound %d flows, %d slots x %d columns, hyperperiod %d, policy %s",
            len(oracle.flow_ids()),
            table.row_count(),
            table.column_count(),
            oracle.hyperperiod(),
            self._policy.value,
        )

    def reset(self) -> None:
        for metric in self._metrics:
            metric.reset()
        self._event_bus = EventBus()
        self._events = []
        self._setup_event_pipeline()
        self._oracle = None
        self._table = None
        self._decoder = None
        self._policy = CompletionPolicy.FINAL_LINK
        self._separator = DEFAULT_SEPARATOR
        self._cells = None
        self._latency_table = None
        self._report = None

    def _setup_event_pipeline(self) -> None:
        self._event_bus.subscribe(self._events.append)
        for metric in self._metrics:
            self._event_bus.subscribe(metric.consume)
        for handler in self._subscribers:
            self._event_bus.subscribe(handler)

    @staticmethod
    def _validate(oracle: ITimingOracle, table: ScheduleTable) -> None:
        flow_ids = oracle.flow_ids()
        if not flow_ids:
            raise ModelError("workload defines no flows")
        if len(flow_ids) != len(set(flow_ids)):
            raise ModelError("workload defines duplicate flow ids")
        for flow in flow_ids:
            path = oracle.path_nodes(flow)
            if len(path) < 2:
                raise ModelError(f"flow '{flow}' path needs at least two nodes, got {path}")
            attempts = oracle.attempts_per_link(flow)
            if len(attempts) != len(path) - 1:
                raise ModelError(
                    f"flow '{flow}' defines {len(attempts)} attempt counts for {len(path) - 1} links"
                )
            if any(count < 1 for count in attempts):
                raise ModelError(f"flow '{flow}' attempts must be >= 1")
            period = oracle.period(flow)
            deadline = oracle.relative_deadline(flow)
            if period <= 0:
                raise ModelError(f"flow '{flow}' period must be > 0")
            if deadline <= 0 or deadline > period:
                raise ModelError(
                    f"flow '{flow}' deadline {deadline} must be in (0, period {period}]"
                )
            for node in path:
                if not table.has_column(node):
                    raise ModelError(f"flow '{flow}' node '{node}' has no schedule table column")

    def _require_bound(self) -> tuple[ITimingOracle, ScheduleTable, IInstructionDecoder]:
        if self._oracle is None or self._table is None or self._decoder is None:
            raise RuntimeError("build() or bind() must be called before analysis")
        return self._oracle, self._table, self._decoder

    def _start_run(self) -> InstanceScanner:
        oracle, table, decoder = self._require_bound()
        self._cells = CellDecodeCache(table, decoder)
        return InstanceScanner(oracle, self._cells, self._policy)

    def build_latency_table(self) -> LatencyTable:
        scanner = self._start_run()
        builder = LatencyTableBuilder(self._oracle, self._cells, scanner)
        self._latency_table = builder.build()
        return self._latency_table

    def build_latency_report(self) -> list[str]:
        scanner = self._start_run()
        for metric in self._metrics:
            metric.reset()
        self._event_bus = EventBus()
        self._events = []
        self._setup_event_pipeline()
        builder = ReportBuilder(
            self._oracle,
            scanner,
            separator=self._separator,
            event_bus=self._event_bus,
        )
        self._report = builder.build()
        return list(self._report.lines)

    def get_latency_table(self) -> LatencyTable:
        if self._latency_table is None:
            raise RuntimeError("build_latency_table() has not been called")
        return self._latency_table

    def latency_report(self) -> list[str]:
        if self._report is None:
            raise RuntimeError("build_latency_report() has not been called")
        return list(self._report.lines)

    @property
    def outcomes(self) -> list[InstanceOutcome]:
        if self._report is None:
            return []
        return list(self._report.outcomes)

    @property
    def events(self) -> list[AnalysisEvent]:
        return list(self._events)

    @property
    def oracle(self) -> ITimingOracle | None:
        return self._oracle

    @property
    def schedule_table(self) -> ScheduleTable | None:
        return self._table

    @property
    def decoder(self) -> IInstructionDecoder | None:
        return self._decoder

    @property
    def completion_policy(self) -> CompletionPolicy:
        return self._policy

    def metric_report(self) -> dict:
        merged: dict = {}
        for metric in self._metrics:
            merged.update(metric.report())
        merged["completion_policy"] = self._policy.value
        if self._oracle is not None:
            merged["hyperperiod"] = self._oracle.hyperperiod()
        return merged

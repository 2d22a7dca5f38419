"""Latency report builder."""

from __future__ import annotations

from dataclasses import dataclass, field
import logging

from wsn_verify.events import EventBus, EventType
from wsn_verify.model import InstanceOutcome
from wsn_verify.workload import ITimingOracle

from .scanner import InstanceScanner

logger = logging.getLogger(__name__)


DEFAULT_SEPARATOR = "-" * 40


@dataclass(slots=True)
class LatencyReport:
    lines: list[str] = field(default_factory=list)
    outcomes: list[InstanceOutcome] = field(default_factory=list)

    def text(self) -> str:
        return "\n".join(self.lines)


def format_outcome(outcome: InstanceOutcome) -> str:
    label = f"{outcome.flow_id}:{outcome.instance}"
    if outcome.latency is None:
        return (
            f"UNKNOWN latency for {label} with deadline {outcome.absolute_deadline}; "
            "Not enough transmissions attempted"
        )
    line = f"Maximum latency for {label} is {outcome.latency}"
    if outcome.deadline_miss:
        line += " => DEADLINE MISS"
    return line


class ReportBuilder:
    """Walk every release of every flow within one hyperperiod, in priority order."""

    def __init__(
        self,
        oracle: ITimingOracle,
        scanner: InstanceScanner,
        *,
        separator: str = DEFAULT_SEPARATOR,
        event_bus: EventBus | None = None,
    ) -> None:
        self._oracle = oracle
        self._scanner = scanner
        self._separator = separator
        self._event_bus = event_bus

    def build(self) -> LatencyReport:
        report = LatencyReport()
        hyperperiod = self._oracle.hyperperiod()
        for flow in self._oracle.flow_ids():
            release = self._oracle.next_release_time(flow, 0)
            while release < hyperperiod:
                outcome = self._scanner.scan(flow, release)
                report.outcomes.append(outcome)
                report.lines.append(format_outcome(outcome))
                self._publish(outcome)
                release = outcome.next_release_time
            report.lines.append(self._separator)
        logger.debug("latency report built: %d instances", len(report.outcomes))
        return report

    def _publish(self, outcome: InstanceOutcome) -> None:
        if self._event_bus is None:
            return
        self._event_bus.publish(
            event_type=EventType.FLOW_RELEASED,
            time=outcome.release_time,
            flow_id=outcome.flow_id,
            instance=outcome.instance,
            payload={"absolute_deadline": outcome.absolute_deadline},
        )
        payload = {
            "release_time": outcome.release_time,
            "deadline": outcome.relative_deadline,
            "absolute_deadline": outcome.absolute_deadline,
            "observed_attempts": outcome.observed_attempts,
            "required_attempts": outcome.required_attempts,
        }
        if outcome.completion_time is None:
            self._event_bus.publish(
                event_type=EventType.INSTANCE_UNKNOWN,
                time=outcome.release_time,
                flow_id=outcome.flow_id,
                instance=outcome.instance,
                payload=payload,
            )
            return
        payload["latency"] = outcome.latency
        self._event_bus.publish(
            event_type=EventType.INSTANCE_COMPLETE,
            time=outcome.completion_time,
            flow_id=outcome.flow_id,
            instance=outcome.instance,
            payload=payload,
        )
        if outcome.deadline_miss:
            self._event_bus.publish(
                event_type=EventType.DEADLINE_MISS,
                time=outcome.completion_time,
                flow_id=outcome.flow_id,
                instance=outcome.instance,
                payload=dict(payload),
            )

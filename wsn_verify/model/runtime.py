"""Runtime types shared across the verifier, decoders and metrics."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class Marker(str, Enum):
    """Latency table annotation token."""

    RELEASE = "R"
    DEADLINE = "D"
    EXECUTING = "E"
    COMPLETE = "C"


class TransmissionKind(str, Enum):
    PUSH = "push"
    PULL = "pull"


@dataclass(frozen=True, slots=True)
class TransmissionRecord:
    """One scheduled transmission attempt decoded from a schedule cell."""

    flow: str
    source: str
    sink: str
    channel: int = 0
    kind: TransmissionKind = TransmissionKind.PUSH

    @property
    def key(self) -> tuple[str, str, str, int]:
        # push at the source and pull at the sink describe the same attempt
        return (self.flow, self.source, self.sink, self.channel)

    @property
    def link(self) -> tuple[str, str]:
        return (self.source, self.sink)


@dataclass(slots=True)
class InstanceOutcome:
    """Scan result for one release instance of a flow."""

    flow_id: str
    instance: int
    release_time: int
    next_release_time: int
    absolute_deadline: int
    relative_deadline: int
    required_attempts: int
    observed_attempts: int = 0
    completion_time: Optional[int] = None

    @property
    def completed(self) -> bool:
        return self.completion_time is not None

    @property
    def latency(self) -> Optional[int]:
        if self.completion_time is None:
            return None
        return self.completion_time - self.release_time + 1

    @property
    def deadline_miss(self) -> bool:
        latency = self.latency
        return latency is not None and latency > self.relative_deadline

    @property
    def slack(self) -> Optional[int]:
        latency = self.latency
        if latency is None:
            return None
        return self.relative_deadline - latency

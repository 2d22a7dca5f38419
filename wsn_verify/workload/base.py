"""Timing oracle abstraction."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional


class ITimingOracle(ABC):
    """Answer release/deadline/topology questions about the flows of a workload."""

    @abstractmethod
    def flow_ids(self) -> list[str]:
        """Return flow ids in priority order."""

    @abstractmethod
    def next_release_time(self, flow: str, from_time: int) -> int:
        """Return the first release of ``flow`` at or after ``from_time``."""

    @abstractmethod
    def current_release_time(self, flow: str, time: int) -> Optional[int]:
        """Return the latest release of ``flow`` at or before ``time``."""

    @abstractmethod
    def next_absolute_deadline(self, flow: str, from_time: int) -> int:
        """Return the absolute deadline of the release at or after ``from_time``."""

    @abstractmethod
    def hyperperiod(self) -> int:
        """Return the least common multiple of all flow periods."""

    @abstractmethod
    def period(self, flow: str) -> int:
        """Return the release period of ``flow``."""

    @abstractmethod
    def relative_deadline(self, flow: str) -> int:
        """Return the deadline of ``flow`` relative to each release."""

    @abstractmethod
    def path_nodes(self, flow: str) -> list[str]:
        """Return the node ids of ``flow`` from source to sink."""

    @abstractmethod
    def attempts_per_link(self, flow: str) -> list[int]:
        """Return required transmission attempts aligned to each hop."""

    def total_required_attempts(self, flow: str) -> int:
        return sum(self.attempts_per_link(flow))

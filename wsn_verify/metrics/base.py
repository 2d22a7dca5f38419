"""Metrics interface."""

from __future__ import annotations

from abc import ABC, abstractmethod

from wsn_verify.events import AnalysisEvent


class IMetric(ABC):
    """Metrics consumer interface."""

    @abstractmethod
    def consume(self, event: AnalysisEvent) -> None:
        """Consume one event."""

    @abstractmethod
    def report(self) -> dict:
        """Return metric report."""

    @abstractmethod
    def reset(self) -> None:
        """Reset internal state."""

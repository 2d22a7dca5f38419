"""Latency verifier interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Callable

from wsn_verify.events import AnalysisEvent
from wsn_verify.model import ModelSpec


class IVerifier(ABC):
    """Schedule latency verifier contract."""

    @abstractmethod
    def build(self, spec: ModelSpec) -> None:
        """Bind workload, schedule table and decoder from a model spec."""

    @abstractmethod
    def build_latency_table(self):
        """Populate and return the latency table."""

    @abstractmethod
    def build_latency_report(self) -> list[str]:
        """Populate and return the latency report lines."""

    @abstractmethod
    def reset(self) -> None:
        """Drop bound collaborators and outputs."""

    @abstractmethod
    def subscribe(self, handler: Callable[[AnalysisEvent], None]) -> None:
        """Subscribe event handler."""

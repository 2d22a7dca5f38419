"""Verification core exports."""

from .interfaces import IVerifier
from .latency_table import LatencyTable, LatencyTableBuilder
from .replay import ScheduleReplay
from .report import DEFAULT_SEPARATOR, LatencyReport, ReportBuilder, format_outcome
from .scanner import InstanceScanner
from .verifier import LatencyVerifier, ModelError

__all__ = [
    "DEFAULT_SEPARATOR",
    "IVerifier",
    "InstanceScanner",
    "LatencyReport",
    "LatencyTable",
    "LatencyTableBuilder",
    "LatencyVerifier",
    "ModelError",
    "ReportBuilder",
    "ScheduleReplay",
    "format_outcome",
]

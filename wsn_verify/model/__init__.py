"""Model package exports."""

from .runtime import InstanceOutcome, Marker, TransmissionKind, TransmissionRecord
from .spec import (
    AnalysisSpec,
    CellSpec,
    CompletionPolicy,
    FlowSpec,
    ModelSpec,
    ScheduleSpec,
)

__all__ = [
    "AnalysisSpec",
    "CellSpec",
    "CompletionPolicy",
    "FlowSpec",
    "InstanceOutcome",
    "Marker",
    "ModelSpec",
    "ScheduleSpec",
    "TransmissionKind",
    "TransmissionRecord",
]

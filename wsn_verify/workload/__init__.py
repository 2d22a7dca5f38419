"""Workload (timing oracle) exports."""

from .base import ITimingOracle
from .periodic import PeriodicWorkload

__all__ = ["ITimingOracle", "PeriodicWorkload"]

"""Metrics exports."""

from .base import IMetric
from .core import LatencyMetrics
from .links import LinkMetrics

__all__ = ["IMetric", "LatencyMetrics", "LinkMetrics"]
